from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.constants import UserRole
from core.pagination import StandardResultsSetPagination
from core.permissions import IsAdminRole
from resellers.models import ResellerPayment
from resellers.serializers import ResellerPaymentCreateSerializer, ResellerPaymentSerializer
from resellers.services import record_payment, reseller_summary

User = get_user_model()


class ResellerPaymentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = ResellerPaymentSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["reseller", "method"]
    ordering_fields = ["created_at", "amount"]

    def get_queryset(self):
        user = self.request.user
        qs = ResellerPayment.objects.select_related("reseller", "recorded_by")

        if user.is_admin:
            return qs
        if user.role == UserRole.RESELLER:
            return qs.filter(reseller=user)
        return qs.none()

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        serializer = ResellerPaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        payment = record_payment(
            data["reseller"],
            data["amount"],
            data["method"],
            reference=data.get("reference", ""),
            notes=data.get("notes", ""),
            actor=request.user,
        )
        return Response(ResellerPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class ResellerBalanceView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user

        if user.is_admin:
            reseller_id = request.query_params.get("reseller", "")
            if not reseller_id.isdigit():
                raise ValidationError({"reseller": "Identifiant de revendeur requis."})
            reseller = get_object_or_404(User, pk=int(reseller_id), role=UserRole.RESELLER)
        elif user.role == UserRole.RESELLER:
            reseller = User.objects.get(pk=user.pk)
        else:
            raise PermissionDenied("Réservé aux revendeurs et à l'administrateur.")

        summary = reseller_summary(reseller)
        return Response({
            key: str(value) if not isinstance(value, (bool, int)) else value
            for key, value in summary.items()
        })
