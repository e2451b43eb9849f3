from rest_framework import serializers

from core.constants import RateCurrency
from rates.models import ExchangeRate, ExchangeRateHistory


class ExchangeRateSerializer(serializers.ModelSerializer):
    currency_pair = serializers.CharField(read_only=True)
    updated_by = serializers.CharField(source="updated_by.username", read_only=True, default=None)

    class Meta:
        model = ExchangeRate
        fields = [
            "id",
            "currency_pair",
            "base_currency",
            "quote_currency",
            "rate",
            "source",
            "active",
            "updated_by",
            "updated_at",
        ]
        read_only_fields = fields


class ExchangeRateHistorySerializer(serializers.ModelSerializer):
    changed_by = serializers.CharField(source="changed_by.username", read_only=True, default=None)

    class Meta:
        model = ExchangeRateHistory
        fields = [
            "id",
            "exchange_rate",
            "base_currency",
            "quote_currency",
            "source",
            "previous_rate",
            "new_rate",
            "changed_by",
            "changed_at",
        ]
        read_only_fields = fields


class SetRateSerializer(serializers.Serializer):
    base_currency = serializers.ChoiceField(choices=RateCurrency.choices)
    quote_currency = serializers.ChoiceField(choices=RateCurrency.choices, default=RateCurrency.CUP)
    rate = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=0)

    def validate_rate(self, value):
        if value <= 0:
            raise serializers.ValidationError("Le taux doit être strictement positif.")
        return value


class ResolvedRateSerializer(serializers.Serializer):
    base_currency = serializers.CharField()
    quote_currency = serializers.CharField()
    rate = serializers.DecimalField(max_digits=14, decimal_places=4)
    source = serializers.CharField()
