from django.urls import re_path
from .views import (
    category_list_create, category_status, category_delete,
    product_list_create, product_delete,
)

# The trailing slash is optional so POSTs from the frontend are not redirected
urlpatterns = [
    # Category endpoints
    re_path(r'^products/categorias/?$', category_list_create, name='category-list'),
    re_path(r'^products/categorias/(?P<pk>[0-9]+)/status/?$', category_status, name='category-status'),
    re_path(r'^products/categorias/(?P<pk>[0-9]+)/?$', category_delete, name='category-delete'),

    # Product endpoints
    re_path(r'^products/?$', product_list_create, name='product-list'),
    re_path(r'^products/(?P<pk>[0-9]+)/?$', product_delete, name='product-delete'),
]
