from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import ModelViewSet

from core.permissions import IsAdminOrReadOnly, IsAdminRole
from pricing.config import load_pricing_config
from pricing.models import BusinessSetting, CommissionTier
from pricing.serializers import BusinessSettingSerializer, CommissionTierSerializer


class CommissionTierViewSet(ModelViewSet):
    """
    Tranches de commission.

    Une tranche n'est jamais supprimée : DELETE la désactive.
    """

    serializer_class = CommissionTierSerializer
    permission_classes = [IsAdminOrReadOnly]
    queryset = CommissionTier.objects.all()
    filterset_fields = ["active"]
    ordering_fields = ["range_min", "name"]

    def perform_destroy(self, instance):
        instance.active = False
        instance.save(update_fields=["active", "updated_at"])


class BusinessSettingViewSet(ModelViewSet):
    serializer_class = BusinessSettingSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    queryset = BusinessSetting.objects.all()
    search_fields = ["key"]

    @action(detail=False, methods=["get"])
    def effective(self, request):
        config = load_pricing_config()
        return Response(
            {field: str(value) for field, value in vars(config).items()},
            status=status.HTTP_200_OK,
        )
