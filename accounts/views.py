# accounts/views.py
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.constants import StaffRoles
from accounts.models import User
from accounts.serializers.staff import MeSerializer, StaffSerializer
from core.permissions import IsAdminRole


class StaffViewSet(viewsets.ModelViewSet):
    """
    Livreurs et revendeurs, gérés par l'administrateur.

    Pas de suppression : un compte porte des soldes et un journal,
    il se désactive.
    """

    serializer_class = StaffSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    http_method_names = ["get", "post", "patch"]
    filterset_fields = ["role", "is_active", "uses_logistics"]
    search_fields = ["username", "first_name", "last_name", "phone"]

    def get_queryset(self):
        return User.objects.filter(role__in=StaffRoles.MANAGED).order_by("last_name", "first_name", "username")

    def get_permissions(self):
        if self.action == "me":
            return [IsAuthenticated()]
        return super().get_permissions()

    @action(detail=False, methods=["get"])
    def me(self, request):
        # Soldes relus : request.user peut dater du début de la requête
        user = User.objects.get(pk=request.user.pk)
        return Response(MeSerializer(user).data, status=status.HTTP_200_OK)
