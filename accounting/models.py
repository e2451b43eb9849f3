# accounting/models.py

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import AppendOnlyModel


class MovementKind(models.TextChoices):
    INCOME = "INCOME", "Recette"
    EXPENSE = "EXPENSE", "Dépense"


class AccountingMovement(AppendOnlyModel):
    """
    Écriture du journal comptable.

    Les recettes de remises sont créées par la livraison ; les autres
    écritures sont saisies par un administrateur. Jamais modifiée.
    """

    kind = models.CharField(max_length=10, choices=MovementKind.choices)
    concept = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=14, decimal_places=2)

    # Traçabilité source
    remittance = models.ForeignKey(
        "remittances.Remittance",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="accounting_movements",
    )

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="accounting_movements_recorded",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "écriture comptable"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="accounting_movement_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.kind} - {self.amount} ({self.concept})"
