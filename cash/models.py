# cash/models.py

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.constants import Currency
from core.models import AppendOnlyModel


class MovementKind(models.TextChoices):
    ALLOCATION = "ALLOCATION", "Allocation"
    WITHDRAWAL = "WITHDRAWAL", "Retrait"
    DELIVERY = "DELIVERY", "Livraison"
    PICKUP = "PICKUP", "Collecte"
    CURRENCY_SALE = "CURRENCY_SALE", "Vente de devises"


CREDIT_KINDS = (MovementKind.ALLOCATION, MovementKind.PICKUP)
DEBIT_KINDS = (MovementKind.WITHDRAWAL, MovementKind.DELIVERY)


class CashMovement(AppendOnlyModel):
    """
    Journal espèces d'un livreur.

    - ALLOCATION, PICKUP : crédit
    - WITHDRAWAL, DELIVERY : débit
    - CURRENCY_SALE : débit de la jambe USD, crédit de la jambe CUP
      (la jambe CUP pointe vers la jambe USD via counterpart)
    """

    courier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="cash_movements",
    )
    kind = models.CharField(max_length=20, choices=MovementKind.choices)
    currency = models.CharField(max_length=3, choices=Currency.choices)
    amount = models.DecimalField(max_digits=14, decimal_places=2)

    balance_before = models.DecimalField(max_digits=14, decimal_places=2)
    balance_after = models.DecimalField(max_digits=14, decimal_places=2)

    exchange_rate = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True)
    remittance = models.ForeignKey(
        "remittances.Remittance",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="cash_movements",
    )
    counterpart = models.OneToOneField(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="counterpart_of",
    )

    notes = models.TextField(blank=True)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cash_movements_recorded",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "mouvement espèces"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["courier", "currency", "id"], name="cash_movement_courier_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="cash_movement_amount_positive",
            ),
            models.CheckConstraint(
                condition=Q(balance_before__gte=0) & Q(balance_after__gte=0),
                name="cash_movement_balances_non_negative",
            ),
            models.CheckConstraint(
                condition=~Q(kind="CURRENCY_SALE") | Q(exchange_rate__isnull=False),
                name="cash_movement_sale_has_rate",
            ),
        ]

    @property
    def signed_amount(self):
        if self.kind in CREDIT_KINDS:
            return self.amount
        if self.kind in DEBIT_KINDS:
            return -self.amount
        # Vente : la devise vendue sort, la monnaie locale entre
        return -self.amount if self.currency == Currency.USD else self.amount

    def __str__(self):
        return f"{self.kind} {self.amount} {self.currency} ({self.courier})"
