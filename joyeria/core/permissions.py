from django.conf import settings
from rest_framework.permissions import SAFE_METHODS, BasePermission

from .exceptions import SessionExpiredError


class IsRecentlyActive(BasePermission):
    """
    Reject authenticated users idle for more than MAX_INACTIVITY_MINUTES and
    refresh ``last_activity`` for the rest.
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return True
        if user.is_inactive_for(settings.MAX_INACTIVITY_MINUTES):
            raise SessionExpiredError()
        user.touch_activity()
        return True


class IsStaffOrReadOnly(BasePermission):
    """Anyone may read; writes need an authenticated staff user"""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        user = request.user
        return bool(user and user.is_authenticated and user.is_staff)
