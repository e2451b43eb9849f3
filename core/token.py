# core/token.py
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class RoleTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        # claims custom
        token['role'] = getattr(user, "role", None)
        token['username'] = user.username
        return token
