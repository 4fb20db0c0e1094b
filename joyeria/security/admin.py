from django.contrib import admin
from .models import SecurityQuestion, LoginSecurity, LoginAttempt


@admin.register(SecurityQuestion)
class SecurityQuestionAdmin(admin.ModelAdmin):
    list_display = ['user', 'question_text', 'updated_at']
    search_fields = ['user__email', 'user__username', 'question_text']
    ordering = ['-updated_at']
    # The hash is never shown or edited here
    exclude = ['answer_hash']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(LoginSecurity)
class LoginSecurityAdmin(admin.ModelAdmin):
    list_display = ['email', 'login_attempts', 'last_login_attempt', 'login_blocked_until']
    list_filter = ['login_blocked_until']
    search_fields = ['email']
    ordering = ['-updated_at']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(LoginAttempt)
class LoginAttemptAdmin(admin.ModelAdmin):
    list_display = ['email', 'success', 'failure_reason', 'ip_address', 'attempt_time']
    list_filter = ['success', 'failure_reason', 'attempt_time']
    search_fields = ['email', 'ip_address']
    ordering = ['-attempt_time']
    readonly_fields = ['email', 'ip_address', 'user_agent', 'attempt_time', 'success', 'failure_reason']
