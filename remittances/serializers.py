from rest_framework import serializers

from pricing.models import DeliveryType
from remittances.models import Remittance


class RemittanceSerializer(serializers.ModelSerializer):
    courier_name = serializers.CharField(source="courier.username", read_only=True, default=None)
    reseller_name = serializers.CharField(source="reseller.username", read_only=True, default=None)
    created_by_name = serializers.CharField(source="created_by.username", read_only=True, default=None)

    class Meta:
        model = Remittance
        fields = [
            "id",
            "tracking_code",
            "sender_name",
            "sender_phone",
            "beneficiary_name",
            "beneficiary_phone",
            "beneficiary_address",
            "province",
            "municipality",
            "amount_sent",
            "exchange_rate_applied",
            "delivery_type",
            "delivery_amount",
            "delivery_currency",
            "commission_percentage",
            "commission_fixed",
            "total_commission",
            "total_charged",
            "platform_commission",
            "reseller_commission",
            "state",
            "courier",
            "courier_name",
            "reseller",
            "reseller_name",
            "created_by",
            "created_by_name",
            "is_request",
            "invoiced",
            "created_at",
            "approved_at",
            "delivered_at",
            "invoiced_at",
            "cancelled_at",
            "delivery_proof",
            "notes",
        ]
        read_only_fields = fields


class RemittanceCreateSerializer(serializers.Serializer):
    sender_name = serializers.CharField(max_length=150)
    sender_phone = serializers.CharField(max_length=50)
    beneficiary_name = serializers.CharField(max_length=150)
    beneficiary_phone = serializers.CharField(max_length=50)
    beneficiary_address = serializers.CharField()
    province = serializers.CharField(max_length=100, required=False, allow_blank=True)
    municipality = serializers.CharField(max_length=100, required=False, allow_blank=True)
    amount_sent = serializers.DecimalField(max_digits=12, decimal_places=2)
    delivery_type = serializers.ChoiceField(choices=DeliveryType.choices, default=DeliveryType.LOCAL)
    notes = serializers.CharField(required=False, allow_blank=True)

    # Administrateur : saisie pour le compte d'un revendeur
    reseller = serializers.IntegerField(required=False, allow_null=True)


class AssignSerializer(serializers.Serializer):
    courier = serializers.IntegerField()


class DeliverSerializer(serializers.Serializer):
    delivery_proof = serializers.CharField(max_length=255, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)


class PublicTrackingSerializer(serializers.ModelSerializer):
    """Vue publique : aucune donnée personnelle ni montant de commission."""

    class Meta:
        model = Remittance
        fields = [
            "tracking_code",
            "state",
            "delivery_type",
            "delivery_amount",
            "delivery_currency",
            "province",
            "municipality",
            "created_at",
            "approved_at",
            "delivered_at",
        ]
        read_only_fields = fields
