from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import ReadOnlyModelViewSet

from core.pagination import StandardResultsSetPagination
from core.permissions import IsAdminRole
from rates.models import ExchangeRate, ExchangeRateHistory, RateSource
from rates.serializers import (
    ExchangeRateHistorySerializer,
    ExchangeRateSerializer,
    ResolvedRateSerializer,
    SetRateSerializer,
)
from rates.services.refresh import clear_rate, set_rate
from rates.services.resolver import current_rates, resolve


class ExchangeRateViewSet(ReadOnlyModelViewSet):
    """
    Taux de change.

    - lecture : tout utilisateur authentifié
    - saisie / retrait du taux manuel : administrateur
    """

    serializer_class = ExchangeRateSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["base_currency", "quote_currency", "source", "active"]
    ordering_fields = ["updated_at", "base_currency"]

    def get_queryset(self):
        return ExchangeRate.objects.select_related("updated_by")

    def get_permissions(self):
        if self.action in ("set_manual", "clear_manual"):
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    @action(detail=False, methods=["get"])
    def current(self, request):
        quote = request.query_params.get("quote", "CUP")
        resolved = current_rates(quote=quote)
        return Response(ResolvedRateSerializer(resolved.values(), many=True).data)

    @action(detail=False, methods=["get"], url_path="resolve")
    def resolve_pair(self, request):
        resolved = resolve(
            request.query_params.get("base", "USD"),
            request.query_params.get("quote", "CUP"),
        )
        return Response(ResolvedRateSerializer(resolved).data)

    @action(detail=False, methods=["post"], url_path="set")
    def set_manual(self, request):
        serializer = SetRateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        rate = set_rate(
            serializer.validated_data["base_currency"],
            serializer.validated_data["quote_currency"],
            serializer.validated_data["rate"],
            source=RateSource.MANUAL,
            actor=request.user,
        )
        return Response(ExchangeRateSerializer(rate).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="clear")
    def clear_manual(self, request):
        cleared = clear_rate(
            request.data.get("base_currency", "USD"),
            request.data.get("quote_currency", "CUP"),
            source=RateSource.MANUAL,
            actor=request.user,
        )
        return Response({"cleared": cleared})

    @action(detail=False, methods=["get"])
    def history(self, request):
        qs = ExchangeRateHistory.objects.select_related("changed_by")

        base = request.query_params.get("base")
        if base:
            qs = qs.filter(base_currency=base.upper())

        page = self.paginate_queryset(qs)
        serializer = ExchangeRateHistorySerializer(page, many=True)
        return self.get_paginated_response(serializer.data)
