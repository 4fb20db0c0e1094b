from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'first_name', 'last_name', 'is_active', 'is_staff', 'last_activity']
    list_filter = ['is_active', 'is_staff', 'is_superuser', 'date_joined']
    search_fields = ['username', 'email', 'first_name', 'last_name', 'firebase_uid']
    ordering = ['username']
    readonly_fields = ['last_activity', 'last_recovery_attempt', 'created_at', 'updated_at']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Joyería', {'fields': ('firebase_uid', 'last_activity', 'created_at', 'updated_at')}),
        ('Recuperación', {'fields': ('recovery_attempts', 'last_recovery_attempt', 'recovery_blocked_until')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Joyería', {'fields': ('email',)}),
    )
