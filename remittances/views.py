# remittances/views.py

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from accounts.constants import UserRole
from core.pagination import StandardResultsSetPagination
from core.permissions import IsAdminRole, IsOwnerOrAdmin
from pricing.serializers import QuoteRequestSerializer, QuoteSerializer
from pricing.services import quote_for
from remittances.filters import RemittanceFilter
from remittances.models import Remittance
from remittances.serializers import (
    AssignSerializer,
    CancelSerializer,
    DeliverSerializer,
    PublicTrackingSerializer,
    RemittanceCreateSerializer,
    RemittanceSerializer,
)
from remittances.services import lifecycle
from remittances.services.tracking import normalize_tracking_code

User = get_user_model()

ADMIN_ACTIONS = ("approve", "assign", "unassign", "invoice", "cancel")


class RemittanceViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Remises.

    - administrateur : tout, transitions comprises
    - livreur : remises assignées, livraison
    - revendeur : ses remises, création
    Aucune modification ni suppression : l'état évolue par les actions.
    """

    serializer_class = RemittanceSerializer
    permission_classes = [IsAuthenticated, IsOwnerOrAdmin]
    pagination_class = StandardResultsSetPagination
    filterset_class = RemittanceFilter
    search_fields = ["tracking_code", "sender_name", "beneficiary_name", "beneficiary_phone"]
    ordering_fields = ["created_at", "amount_sent", "delivered_at"]

    def get_queryset(self):
        user = self.request.user
        qs = Remittance.objects.select_related("courier", "reseller", "created_by")

        if user.is_admin:
            return qs
        if user.role == UserRole.COURIER:
            return qs.filter(courier=user)
        if user.role == UserRole.RESELLER:
            return qs.filter(reseller=user)
        return qs.none()

    def get_permissions(self):
        if self.action in ADMIN_ACTIONS:
            return [IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        user = request.user
        serializer = RemittanceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        reseller_id = data.pop("reseller", None)

        if user.role == UserRole.RESELLER:
            reseller = user
        elif user.is_admin:
            reseller = None
            if reseller_id:
                reseller = User.objects.filter(pk=reseller_id, role=UserRole.RESELLER, is_active=True).first()
                if reseller is None:
                    raise ValidationError({"reseller": "Revendeur actif introuvable."})
        else:
            raise PermissionDenied("Création réservée à l'administrateur et aux revendeurs.")

        remittance = lifecycle.create_remittance(data, actor=user, reseller=reseller)
        return Response(RemittanceSerializer(remittance).data, status=status.HTTP_201_CREATED)

    # =========================
    # TRANSITIONS
    # =========================

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        remittance = lifecycle.approve(self.get_object(), actor=request.user)
        return Response(RemittanceSerializer(remittance).data)

    @action(detail=True, methods=["post"])
    def assign(self, request, pk=None):
        serializer = AssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        remittance = lifecycle.assign(
            self.get_object(),
            serializer.validated_data["courier"],
            actor=request.user,
        )
        return Response(RemittanceSerializer(remittance).data)

    @action(detail=True, methods=["post"])
    def unassign(self, request, pk=None):
        remittance = lifecycle.unassign(self.get_object(), actor=request.user)
        return Response(RemittanceSerializer(remittance).data)

    @action(detail=True, methods=["post"])
    def deliver(self, request, pk=None):
        serializer = DeliverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        remittance = lifecycle.deliver(
            self.get_object(),
            actor=request.user,
            proof=serializer.validated_data.get("delivery_proof", ""),
            notes=serializer.validated_data.get("notes", ""),
        )
        return Response(RemittanceSerializer(remittance).data)

    @action(detail=True, methods=["post"])
    def invoice(self, request, pk=None):
        remittance = lifecycle.invoice(self.get_object(), actor=request.user)
        return Response(RemittanceSerializer(remittance).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        serializer = CancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        remittance = lifecycle.cancel(
            self.get_object(),
            actor=request.user,
            reason=serializer.validated_data.get("reason", ""),
        )
        return Response(RemittanceSerializer(remittance).data)

    @action(detail=False, methods=["post"])
    def quote(self, request):
        serializer = QuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        reseller = request.user if request.user.role == UserRole.RESELLER else None
        quote = quote_for(
            serializer.validated_data["amount_sent"],
            serializer.validated_data["delivery_type"],
            reseller=reseller,
        )
        return Response(QuoteSerializer(quote.as_dict()).data)


# ============================================================
# ACCÈS PUBLIC
# ============================================================

class PublicAPIView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "public"


class PublicRequestView(PublicAPIView):
    """Demande de remise sans compte ; validée ensuite par l'administrateur."""

    def post(self, request):
        serializer = RemittanceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop("reseller", None)

        remittance = lifecycle.create_remittance(data, is_request=True)
        return Response(PublicTrackingSerializer(remittance).data, status=status.HTTP_201_CREATED)


class PublicTrackView(PublicAPIView):
    def get(self, request, code):
        remittance = get_object_or_404(Remittance, tracking_code=normalize_tracking_code(code))
        return Response(PublicTrackingSerializer(remittance).data)


class PublicQuoteView(PublicAPIView):
    def post(self, request):
        serializer = QuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        quote = quote_for(
            serializer.validated_data["amount_sent"],
            serializer.validated_data["delivery_type"],
        )
        return Response(QuoteSerializer(quote.as_dict()).data)
