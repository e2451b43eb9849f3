from django.contrib.auth import get_user_model
from rest_framework import serializers

from disputes.models import (
    Dispute,
    DisputeComment,
    DisputeKind,
    DisputePriority,
    DisputeStatus,
    ResolutionType,
)

User = get_user_model()


class DisputeCommentSerializer(serializers.ModelSerializer):
    author_name = serializers.CharField(source="author.username", read_only=True)

    class Meta:
        model = DisputeComment
        fields = ["id", "kind", "content", "internal", "author", "author_name", "created_at"]
        read_only_fields = fields


class DisputeSerializer(serializers.ModelSerializer):
    tracking_code = serializers.CharField(source="remittance.tracking_code", read_only=True)
    reported_by_name = serializers.CharField(source="reported_by.username", read_only=True)
    assigned_to_name = serializers.CharField(source="assigned_to.username", read_only=True, default=None)
    is_closed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Dispute
        fields = [
            "id",
            "number",
            "remittance",
            "tracking_code",
            "kind",
            "priority",
            "status",
            "description",
            "reported_by",
            "reported_by_name",
            "assigned_to",
            "assigned_to_name",
            "resolution",
            "resolution_type",
            "refund_amount",
            "resolved_by",
            "resolved_at",
            "created_at",
            "deadline",
            "updated_at",
            "is_closed",
        ]
        read_only_fields = fields


class DisputeCreateSerializer(serializers.Serializer):
    remittance = serializers.IntegerField()
    kind = serializers.ChoiceField(choices=DisputeKind.choices)
    description = serializers.CharField(min_length=10, max_length=2000)
    priority = serializers.ChoiceField(choices=DisputePriority.choices, required=False)


class DisputeStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DisputeStatus.choices)
    note = serializers.CharField(required=False, allow_blank=True, max_length=2000)


class DisputeAssignSerializer(serializers.Serializer):
    assigned_to = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())


class DisputeResolveSerializer(serializers.Serializer):
    resolution = serializers.CharField(max_length=2000)
    resolution_type = serializers.ChoiceField(choices=ResolutionType.choices)
    refund_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class DisputeRejectSerializer(serializers.Serializer):
    resolution = serializers.CharField(max_length=2000)


class DisputeCommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=2000)
    internal = serializers.BooleanField(required=False, default=False)
