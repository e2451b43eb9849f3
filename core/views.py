# core/views.py
from rest_framework_simplejwt.views import TokenObtainPairView

from core.token import RoleTokenObtainPairSerializer


# -----------------------
# JWT login (claims rôle)
# -----------------------
class RoleTokenObtainPairView(TokenObtainPairView):
    serializer_class = RoleTokenObtainPairSerializer
