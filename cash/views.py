# cash/views.py

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.constants import UserRole
from cash import services
from cash.models import CashMovement, MovementKind
from cash.serializers import (
    CashMovementCreateSerializer,
    CashMovementSerializer,
    SellCurrencySerializer,
)
from core.pagination import StandardResultsSetPagination
from core.permissions import IsAdminRole

User = get_user_model()

WRITERS = {
    MovementKind.ALLOCATION: services.allocate,
    MovementKind.WITHDRAWAL: services.withdraw,
    MovementKind.PICKUP: services.record_pickup,
}


def _target_courier(request, courier_id):
    """Le livreur agit pour lui-même ; l'administrateur désigne le livreur."""

    user = request.user
    if courier_id not in (None, ""):
        try:
            courier_id = int(courier_id)
        except (TypeError, ValueError):
            raise ValidationError({"courier": "Identifiant de livreur invalide."})

    if user.is_admin:
        if not courier_id:
            raise ValidationError({"courier": "Livreur obligatoire."})
        return courier_id
    if user.role == UserRole.COURIER:
        if courier_id and courier_id != user.pk:
            raise PermissionDenied("Un livreur n'agit que sur son propre solde.")
        return user.pk
    raise PermissionDenied("Réservé aux livreurs et à l'administrateur.")


class CashMovementViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Journal espèces.

    Lecture seule hors création ; les débits de livraison sont écrits
    par la transition de la remise.
    """

    serializer_class = CashMovementSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["courier", "kind", "currency", "remittance"]
    ordering_fields = ["created_at", "amount"]

    def get_queryset(self):
        user = self.request.user
        qs = CashMovement.objects.select_related("courier", "recorded_by", "remittance")

        if user.is_admin:
            return qs
        if user.role == UserRole.COURIER:
            return qs.filter(courier=user)
        return qs.none()

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        serializer = CashMovementCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        movement = WRITERS[data["kind"]](
            data["courier"],
            data["currency"],
            data["amount"],
            actor=request.user,
            notes=data.get("notes", ""),
        )
        return Response(CashMovementSerializer(movement).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="sell-currency")
    def sell_currency(self, request):
        serializer = SellCurrencySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        courier_id = _target_courier(request, data.get("courier"))

        usd_leg, cup_leg = services.sell_currency(
            courier_id,
            data["usd_amount"],
            data["exchange_rate"],
            actor=request.user,
            notes=data.get("notes", ""),
        )
        return Response(
            CashMovementSerializer([usd_leg, cup_leg], many=True).data,
            status=status.HTTP_201_CREATED,
        )


class CashBalanceView(APIView):
    """Soldes du livreur et contrôle de cohérence avec le journal."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        courier_id = _target_courier(request, request.query_params.get("courier"))
        courier = get_object_or_404(User, pk=courier_id, role=UserRole.COURIER)

        reconciliation = services.reconcile_courier(courier)
        return Response({
            "courier": courier.pk,
            "username": courier.username,
            "balance_usd": str(courier.balance_usd),
            "balance_cup": str(courier.balance_cup),
            "consistent": all(line["consistent"] for line in reconciliation.values()),
            "ledger": {
                currency: {key: str(value) if key != "consistent" else value for key, value in line.items()}
                for currency, line in reconciliation.items()
            },
        })
