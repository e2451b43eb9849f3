from rest_framework import serializers

from resellers.models import ResellerPayment


class ResellerPaymentSerializer(serializers.ModelSerializer):
    reseller_name = serializers.CharField(source="reseller.username", read_only=True)
    recorded_by = serializers.CharField(source="recorded_by.username", read_only=True, default=None)

    class Meta:
        model = ResellerPayment
        fields = [
            "id",
            "reseller",
            "reseller_name",
            "amount",
            "method",
            "reference",
            "notes",
            "balance_before",
            "balance_after",
            "recorded_by",
            "created_at",
        ]
        read_only_fields = fields


class ResellerPaymentCreateSerializer(serializers.Serializer):
    reseller = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    method = serializers.CharField(min_length=2, max_length=50)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
