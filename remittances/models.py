# remittances/models.py

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.constants import Currency
from pricing.models import DeliveryType
from remittances.state_machine import RemittanceState


class Remittance(models.Model):
    """
    Commande de remise.

    Les montants sont figés à la création (taux appliqué compris) et ne
    sont jamais recalculés. L'état n'évolue que par
    remittances.services.lifecycle.
    """

    tracking_code = models.CharField(max_length=10, unique=True, editable=False)

    # =========================
    # PARTIES
    # =========================
    sender_name = models.CharField(max_length=150)
    sender_phone = models.CharField(max_length=50)
    beneficiary_name = models.CharField(max_length=150)
    beneficiary_phone = models.CharField(max_length=50)
    beneficiary_address = models.TextField()
    province = models.CharField(max_length=100, blank=True)
    municipality = models.CharField(max_length=100, blank=True)

    # =========================
    # MONTANTS (instantané)
    # =========================
    amount_sent = models.DecimalField(max_digits=12, decimal_places=2)
    exchange_rate_applied = models.DecimalField(max_digits=14, decimal_places=4)
    delivery_type = models.CharField(max_length=10, choices=DeliveryType.choices, default=DeliveryType.LOCAL)
    delivery_amount = models.DecimalField(max_digits=14, decimal_places=2)
    delivery_currency = models.CharField(max_length=3, choices=Currency.choices)
    commission_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    commission_fixed = models.DecimalField(max_digits=12, decimal_places=2)
    total_commission = models.DecimalField(max_digits=12, decimal_places=2)
    total_charged = models.DecimalField(max_digits=12, decimal_places=2)
    platform_commission = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    reseller_commission = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    # =========================
    # WORKFLOW
    # =========================
    state = models.CharField(max_length=20, choices=RemittanceState.choices, default=RemittanceState.PENDING)
    courier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="assigned_remittances",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_remittances",
    )
    reseller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="reseller_remittances",
    )
    is_request = models.BooleanField(default=False)
    invoiced = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    invoiced_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Référence opaque vers le stockage des preuves
    delivery_proof = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["state", "created_at"], name="remittance_state_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount_sent__gt=0),
                name="remittance_amount_sent_positive",
            ),
            models.CheckConstraint(
                condition=Q(delivery_amount__gt=0),
                name="remittance_delivery_amount_positive",
            ),
            models.CheckConstraint(
                condition=Q(total_charged__gt=0),
                name="remittance_total_charged_positive",
            ),
            models.CheckConstraint(
                condition=Q(exchange_rate_applied__gt=0),
                name="remittance_exchange_rate_positive",
            ),
            models.CheckConstraint(
                condition=(
                    Q(invoiced=True, state=RemittanceState.INVOICED)
                    | (Q(invoiced=False) & ~Q(state=RemittanceState.INVOICED))
                ),
                name="remittance_invoiced_matches_state",
            ),
        ]

    @property
    def is_terminal(self):
        return self.state in (RemittanceState.INVOICED, RemittanceState.CANCELLED)

    def __str__(self):
        return f"{self.tracking_code} ({self.state})"
