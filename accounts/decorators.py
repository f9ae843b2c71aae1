from rest_framework.permissions import BasePermission
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class HasRole(BasePermission):
    """
    DRF permission that only lets through authenticated users whose role is
    in ``allowed_roles``. Subclass and set ``allowed_roles``.
    """
    allowed_roles = ()
    message = "Access denied"

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, 'role', None) in self.allowed_roles


class IsAdminRole(HasRole):
    allowed_roles = ('admin',)
    message = "Access denied. Admin role required."


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Embed role and username in the JWT payload"""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        token['username'] = user.username
        return token
