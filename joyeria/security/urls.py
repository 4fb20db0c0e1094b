from django.urls import re_path
from .views import (
    set_security_question, get_security_question, verify_security_answer,
    secure_questions, reset_password_with_question, login_view, register,
)

# The trailing slash is optional so POSTs from the frontend are not redirected
urlpatterns = [
    # Auth endpoints
    re_path(r'^auth/login/?$', login_view, name='login'),
    re_path(r'^auth/register/?$', register, name='register'),

    # Security question endpoints
    re_path(r'^security/set-security-question/?$', set_security_question, name='set-security-question'),
    re_path(r'^security/get-security-question/?$', get_security_question, name='get-security-question'),
    re_path(r'^security/verify-security-answer/?$', verify_security_answer, name='verify-security-answer'),
    re_path(r'^security/secure-questions/?$', secure_questions, name='secure-questions'),
    re_path(r'^security/reset-password-with-question/?$', reset_password_with_question,
            name='reset-password-with-question'),
]
