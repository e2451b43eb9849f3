# resellers/models.py

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import AppendOnlyModel


class ResellerPayment(AppendOnlyModel):
    """Versement au revendeur ; diminue sa commission en attente."""

    reseller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payments_received",
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    method = models.CharField(max_length=50, help_text="Zelle, espèces, virement...")
    reference = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)

    balance_before = models.DecimalField(max_digits=14, decimal_places=2)
    balance_after = models.DecimalField(max_digits=14, decimal_places=2)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reseller_payments_recorded",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "paiement revendeur"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="reseller_payment_amount_positive",
            ),
            models.CheckConstraint(
                condition=Q(balance_after__gte=0),
                name="reseller_payment_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.reseller} {self.amount} ({self.method})"
