from django.urls import path
from . import views

app_name = 'storefront'

urlpatterns = [
    path('nosotros/', views.about_us, name='about'),
    path('ubicacion/', views.location, name='location'),
    path('admin/reportes/', views.admin_reports, name='admin-reports'),
    path('admin/reportes/<int:pk>/', views.admin_report_detail, name='admin-report-detail'),
]
