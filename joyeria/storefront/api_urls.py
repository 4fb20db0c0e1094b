from django.urls import path
from .views import about_us_content, location_content, report_list, report_detail

urlpatterns = [
    # Content endpoints
    path('content/about/', about_us_content, name='content-about'),
    path('content/location/', location_content, name='content-location'),

    # Report endpoints
    path('reports/', report_list, name='report-list'),
    path('reports/<int:pk>/', report_detail, name='report-detail'),
]
