from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.models import AccountingMovement
from accounting.serializers import AccountingEntrySerializer, AccountingMovementSerializer
from accounting.services import journal_totals, record
from core.pagination import StandardResultsSetPagination
from core.permissions import IsAdminRole


class AccountingMovementViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Journal comptable, réservé à l'administrateur.
    Les recettes des remises sont écrites par la livraison ; la création
    manuelle sert aux autres recettes et aux dépenses.
    """

    serializer_class = AccountingMovementSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["kind", "remittance"]
    search_fields = ["concept"]
    ordering_fields = ["created_at", "amount"]

    def get_queryset(self):
        return AccountingMovement.objects.select_related("remittance", "recorded_by")

    def create(self, request, *args, **kwargs):
        serializer = AccountingEntrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        movement = record(
            serializer.validated_data["kind"],
            serializer.validated_data["concept"],
            serializer.validated_data["amount"],
            actor=request.user,
        )
        return Response(AccountingMovementSerializer(movement).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def totals(self, request):
        totals = journal_totals(self.filter_queryset(self.get_queryset()))
        return Response({key: str(value) for key, value in totals.items()})
