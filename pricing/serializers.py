from decimal import Decimal, InvalidOperation

from rest_framework import serializers

from pricing.config import SETTING_FIELDS
from pricing.models import BusinessSetting, CommissionTier, DeliveryType


class CommissionTierSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommissionTier
        fields = [
            "id",
            "name",
            "range_min",
            "range_max",
            "percentage",
            "fixed_fee",
            "active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate(self, attrs):
        range_min = attrs.get("range_min", getattr(self.instance, "range_min", None))
        range_max = attrs.get("range_max", getattr(self.instance, "range_max", None))

        if range_max is not None and range_min is not None and range_max <= range_min:
            raise serializers.ValidationError(
                {"range_max": "La borne haute doit être supérieure à la borne basse."}
            )

        candidate = CommissionTier(
            pk=getattr(self.instance, "pk", None),
            name=attrs.get("name", getattr(self.instance, "name", "")),
            range_min=range_min,
            range_max=range_max,
            active=attrs.get("active", getattr(self.instance, "active", True)),
        )
        if candidate.active:
            others = CommissionTier.objects.filter(active=True).exclude(pk=candidate.pk)
            for tier in others:
                if candidate.overlaps(tier):
                    raise serializers.ValidationError(
                        f"La tranche chevauche la tranche active « {tier.name} »."
                    )

        return attrs


class BusinessSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = BusinessSetting
        fields = ["id", "key", "value", "description", "updated_at"]
        read_only_fields = ["updated_at"]

    def validate_key(self, value):
        key = value.strip().upper()
        if key not in SETTING_FIELDS:
            raise serializers.ValidationError(
                f"Clé inconnue. Clés reconnues : {', '.join(sorted(SETTING_FIELDS))}"
            )
        return key

    def validate_value(self, value):
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            raise serializers.ValidationError("Valeur numérique attendue.")
        if not number.is_finite() or number < 0:
            raise serializers.ValidationError("Valeur numérique positive attendue.")
        return str(number)


class QuoteRequestSerializer(serializers.Serializer):
    amount_sent = serializers.DecimalField(max_digits=12, decimal_places=2)
    delivery_type = serializers.ChoiceField(choices=DeliveryType.choices, default=DeliveryType.LOCAL)


class QuoteSerializer(serializers.Serializer):
    amount_sent = serializers.DecimalField(max_digits=12, decimal_places=2)
    delivery_type = serializers.CharField()
    delivery_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    delivery_currency = serializers.CharField()
    exchange_rate = serializers.DecimalField(max_digits=14, decimal_places=4)
    commission_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    commission_fixed = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_commission = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_charged = serializers.DecimalField(max_digits=12, decimal_places=2)
    platform_commission = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    reseller_commission = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
