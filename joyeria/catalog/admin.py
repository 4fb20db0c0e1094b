from django.contrib import admin
from .models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['nombre', 'activo', 'created_at']
    list_filter = ['activo']
    search_fields = ['nombre', 'descripcion']
    ordering = ['nombre']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['nombre', 'categoria', 'precio', 'stock', 'activo', 'created_at']
    list_filter = ['activo', 'categoria']
    search_fields = ['nombre', 'descripcion']
    ordering = ['-id']
    list_select_related = ['categoria']
    readonly_fields = ['created_at', 'updated_at']
