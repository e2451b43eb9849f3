# disputes/views.py

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.pagination import StandardResultsSetPagination
from core.permissions import IsAdminRole
from disputes import services
from disputes.filters import DisputeFilter
from disputes.models import Dispute
from disputes.serializers import (
    DisputeAssignSerializer,
    DisputeCommentCreateSerializer,
    DisputeCommentSerializer,
    DisputeCreateSerializer,
    DisputeRejectSerializer,
    DisputeResolveSerializer,
    DisputeSerializer,
    DisputeStatusSerializer,
)

ADMIN_ACTIONS = ("change_status", "assign", "resolve", "reject", "stats")


class DisputeViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Litiges.

    - administrateur : tous les litiges, traitement et clôture
    - revendeur : ouvre et suit les litiges de ses remises
    Les notes internes ne sont visibles que de l'administrateur.
    """

    serializer_class = DisputeSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    filterset_class = DisputeFilter
    search_fields = ["number", "remittance__tracking_code", "description"]
    ordering_fields = ["created_at", "deadline", "priority"]

    def get_queryset(self):
        user = self.request.user
        qs = Dispute.objects.select_related("remittance", "reported_by", "assigned_to")

        if user.is_admin:
            return qs
        return qs.filter(reported_by=user)

    def get_permissions(self):
        if self.action in ADMIN_ACTIONS:
            return [IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        serializer = DisputeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        dispute = services.open_dispute(
            data["remittance"],
            data["kind"],
            data["description"],
            actor=request.user,
            priority=data.get("priority"),
        )
        return Response(DisputeSerializer(dispute).data, status=status.HTTP_201_CREATED)

    # =========================
    # TRAITEMENT (admin)
    # =========================

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        serializer = DisputeStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dispute = services.change_status(
            self.get_object(),
            serializer.validated_data["status"],
            actor=request.user,
            note=serializer.validated_data.get("note", ""),
        )
        return Response(DisputeSerializer(dispute).data)

    @action(detail=True, methods=["post"])
    def assign(self, request, pk=None):
        serializer = DisputeAssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dispute = services.assign_dispute(
            self.get_object(),
            serializer.validated_data["assigned_to"],
            actor=request.user,
        )
        return Response(DisputeSerializer(dispute).data)

    @action(detail=True, methods=["post"])
    def resolve(self, request, pk=None):
        serializer = DisputeResolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        dispute = services.resolve_dispute(
            self.get_object(),
            actor=request.user,
            resolution=data["resolution"],
            resolution_type=data["resolution_type"],
            refund_amount=data.get("refund_amount"),
        )
        return Response(DisputeSerializer(dispute).data)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        serializer = DisputeRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dispute = services.reject_dispute(
            self.get_object(),
            actor=request.user,
            resolution=serializer.validated_data["resolution"],
        )
        return Response(DisputeSerializer(dispute).data)

    # =========================
    # FIL D'ACTIVITÉ
    # =========================

    @action(detail=True, methods=["get", "post"])
    def comments(self, request, pk=None):
        dispute = self.get_object()

        if request.method == "POST":
            serializer = DisputeCommentCreateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            comment = services.add_comment(
                dispute,
                request.user,
                serializer.validated_data["content"],
                internal=serializer.validated_data.get("internal", False),
            )
            return Response(DisputeCommentSerializer(comment).data, status=status.HTTP_201_CREATED)

        comments = dispute.comments.select_related("author")
        if not request.user.is_admin:
            comments = comments.filter(internal=False)
        return Response(DisputeCommentSerializer(comments, many=True).data)

    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(services.dispute_stats(self.filter_queryset(self.get_queryset())))
