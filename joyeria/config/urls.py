"""
URL configuration for the joyeria project.

API endpoints live under ``api/v1/``; the storefront HTML screens are mounted
at the site root.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Joyería Diana Laura - Administración"
admin.site.site_title = "Joyería Diana Laura"
admin.site.index_title = "Panel de administración"

urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('api/v1/', include('joyeria.core.urls')),
    path('api/v1/', include('joyeria.security.urls')),
    path('api/v1/', include('joyeria.catalog.urls')),
    path('api/v1/', include('joyeria.storefront.api_urls')),
    path('', include('joyeria.storefront.urls')),
]
