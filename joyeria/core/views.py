from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenRefreshView
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken
from django.contrib.auth import get_user_model
from .permissions import IsRecentlyActive
from .serializers import UserSerializer
from .utils import api_response

User = get_user_model()


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Refresh that answers 401 instead of 500 when the user was deleted"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except User.DoesNotExist:
            raise InvalidToken('Token inválido. El usuario ya no existe.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsRecentlyActive])
def user_me(request):
    """Current user; also keeps the session alive"""
    user_data = UserSerializer(request.user).data
    user_data['groups'] = list(request.user.groups.values_list('name', flat=True))
    return api_response(data=user_data)
