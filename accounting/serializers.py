from rest_framework import serializers

from accounting.models import AccountingMovement, MovementKind


class AccountingMovementSerializer(serializers.ModelSerializer):
    recorded_by = serializers.CharField(source="recorded_by.username", read_only=True, default=None)
    tracking_code = serializers.CharField(source="remittance.tracking_code", read_only=True, default=None)

    class Meta:
        model = AccountingMovement
        fields = [
            "id",
            "kind",
            "concept",
            "amount",
            "remittance",
            "tracking_code",
            "recorded_by",
            "created_at",
        ]
        read_only_fields = fields


class AccountingEntrySerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=MovementKind.choices)
    concept = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
