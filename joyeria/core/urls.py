from django.urls import re_path
from .views import CustomTokenRefreshView, user_me

urlpatterns = [
    # Auth endpoints (login and registration live in joyeria.security)
    re_path(r'^auth/refresh/?$', CustomTokenRefreshView.as_view(), name='token_refresh'),
    re_path(r'^auth/me/?$', user_me, name='user-me'),
]
