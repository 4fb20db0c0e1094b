"""Request helpers shared by the API views"""
from rest_framework.response import Response


# Checked in order; proxies in front of the app set one of these.
CLIENT_IP_HEADERS = (
    'HTTP_X_REAL_IP',
    'HTTP_X_FORWARDED_FOR',
    'HTTP_CF_CONNECTING_IP',
    'HTTP_X_CLUSTER_CLIENT_IP',
    'HTTP_X_FORWARDED',
    'HTTP_FORWARDED_FOR',
)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    for header in CLIENT_IP_HEADERS:
        value = request.META.get(header)
        if value:
            return value.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR') or None


def get_user_agent(request):
    if not request or not hasattr(request, 'META'):
        return 'unknown'
    return request.META.get('HTTP_USER_AGENT') or 'unknown'


def api_response(data=None, message=None, status=None):
    """Build the ``{"success": true, ...}`` envelope used by every endpoint"""
    body = {'success': True}
    if message:
        body['message'] = message
    if data is not None:
        body['data'] = data
    return Response(body, status=status or 200)
