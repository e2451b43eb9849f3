# core/permissions.py
from rest_framework.permissions import BasePermission, SAFE_METHODS

from accounts.constants import UserRole


class IsAdminRole(BasePermission):
    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and (user.is_superuser or user.role == UserRole.ADMIN)
        )


class IsCourier(BasePermission):
    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and user.is_active
            and user.role == UserRole.COURIER
        )


class IsReseller(BasePermission):
    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and user.is_active
            and user.role == UserRole.RESELLER
        )


class IsAdminOrReadOnly(BasePermission):
    """
    Lecture pour tout utilisateur authentifié, écriture pour l'administrateur.
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return IsAdminRole().has_permission(request, view)


class IsOwnerOrAdmin(BasePermission):
    """
    Permission d'objet : l'administrateur voit tout, les autres
    uniquement ce qui leur est rattaché (livreur assigné, revendeur).
    """

    owner_fields = ("courier_id", "reseller_id", "created_by_id")

    def has_object_permission(self, request, view, obj):
        user = request.user
        if user.is_superuser or user.role == UserRole.ADMIN:
            return True
        return any(
            getattr(obj, field, None) == user.id
            for field in self.owner_fields
        )
