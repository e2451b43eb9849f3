# pricing/models.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class DeliveryType(models.TextChoices):
    LOCAL = "LOCAL", "Livraison en monnaie nationale (CUP)"
    HARD = "HARD", "Livraison en devise (USD)"


class CommissionTier(models.Model):
    """
    Tranche de commission sur [range_min, range_max).

    range_max vide = tranche ouverte. Les tranches actives ne doivent
    pas se chevaucher.
    """

    name = models.CharField(max_length=100)
    range_min = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    range_max = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Borne haute exclue ; vide = sans limite",
    )
    percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))
    fixed_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["range_min"]
        constraints = [
            models.CheckConstraint(
                condition=Q(range_max__isnull=True) | Q(range_max__gt=models.F("range_min")),
                name="commission_tier_range_ordered",
            ),
            models.CheckConstraint(
                condition=Q(percentage__gte=0) & Q(fixed_fee__gte=0) & Q(range_min__gte=0),
                name="commission_tier_non_negative",
            ),
        ]

    def contains(self, amount):
        if amount < self.range_min:
            return False
        return self.range_max is None or amount < self.range_max

    def overlaps(self, other):
        self_max = self.range_max
        other_max = other.range_max
        starts_before_other_ends = other_max is None or self.range_min < other_max
        ends_after_other_starts = self_max is None or other.range_min < self_max
        return starts_before_other_ends and ends_after_other_starts

    def clean(self):
        if not self.active:
            return

        for tier in CommissionTier.objects.filter(active=True).exclude(pk=self.pk):
            if self.overlaps(tier):
                raise ValidationError(
                    f"La tranche chevauche la tranche active « {tier.name} »."
                )

    def __str__(self):
        upper = self.range_max if self.range_max is not None else "∞"
        return f"{self.name} [{self.range_min} – {upper}) {self.percentage}% + {self.fixed_fee}"


class BusinessSetting(models.Model):
    """
    Règle métier ajustable à chaud (clé / valeur).

    Les clés reconnues sont celles de settings.REMITTANCE_PRICING.
    """

    key = models.CharField(max_length=64, unique=True)
    value = models.CharField(max_length=255)
    description = models.CharField(max_length=255, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self):
        return f"{self.key}={self.value}"
