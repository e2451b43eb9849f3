from decimal import Decimal

from rest_framework import serializers

from cash.models import CashMovement, MovementKind
from core.constants import Currency

# Mouvements saisis directement ; DELIVERY et CURRENCY_SALE ont leur propre flux
MANUAL_KINDS = [
    (MovementKind.ALLOCATION, MovementKind.ALLOCATION.label),
    (MovementKind.WITHDRAWAL, MovementKind.WITHDRAWAL.label),
    (MovementKind.PICKUP, MovementKind.PICKUP.label),
]


class CashMovementSerializer(serializers.ModelSerializer):
    courier_name = serializers.CharField(source="courier.username", read_only=True)
    recorded_by = serializers.CharField(source="recorded_by.username", read_only=True, default=None)
    tracking_code = serializers.CharField(source="remittance.tracking_code", read_only=True, default=None)

    class Meta:
        model = CashMovement
        fields = [
            "id",
            "courier",
            "courier_name",
            "kind",
            "currency",
            "amount",
            "balance_before",
            "balance_after",
            "exchange_rate",
            "remittance",
            "tracking_code",
            "counterpart",
            "notes",
            "recorded_by",
            "created_at",
        ]
        read_only_fields = fields


class CashMovementCreateSerializer(serializers.Serializer):
    courier = serializers.IntegerField()
    kind = serializers.ChoiceField(choices=MANUAL_KINDS)
    currency = serializers.ChoiceField(choices=Currency.choices)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    notes = serializers.CharField(required=False, allow_blank=True)


class SellCurrencySerializer(serializers.Serializer):
    # Obligatoire pour l'administrateur ; le livreur vend pour lui-même
    courier = serializers.IntegerField(required=False)
    usd_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    # Taux négocié par le livreur, jamais déduit du taux des remises
    exchange_rate = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=Decimal("0.0001"))
    notes = serializers.CharField(required=False, allow_blank=True)
