# rates/models.py

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.constants import RateCurrency
from core.models import AppendOnlyModel


class RateSource(models.TextChoices):
    MANUAL = "MANUAL", "Saisie manuelle"
    PRIMARY = "PRIMARY", "Source externe principale"
    SECONDARY = "SECONDARY", "Source externe secondaire"


class ExchangeRate(models.Model):
    """
    Taux actif d'une paire de devises pour une source donnée.

    Une seule ligne active par (paire, source). Le résolveur choisit
    MANUAL, puis PRIMARY, puis SECONDARY.
    """

    base_currency = models.CharField(max_length=3, choices=RateCurrency.choices)
    quote_currency = models.CharField(
        max_length=3, choices=RateCurrency.choices, default=RateCurrency.CUP
    )
    rate = models.DecimalField(max_digits=14, decimal_places=4)
    source = models.CharField(
        max_length=10, choices=RateSource.choices, default=RateSource.MANUAL
    )
    active = models.BooleanField(default=True)

    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="rates_updated",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["base_currency", "quote_currency", "-updated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["base_currency", "quote_currency", "source"],
                condition=Q(active=True),
                name="unique_active_rate_per_pair_source",
            ),
            models.CheckConstraint(
                condition=Q(rate__gt=0),
                name="exchange_rate_positive",
            ),
        ]

    @property
    def currency_pair(self):
        return f"{self.base_currency}/{self.quote_currency}"

    def __str__(self):
        return f"{self.currency_pair}={self.rate} ({self.source})"


class ExchangeRateHistory(AppendOnlyModel):
    """
    Audit : une ligne par changement de valeur d'un taux actif.
    """

    exchange_rate = models.ForeignKey(
        ExchangeRate, on_delete=models.PROTECT, related_name="history"
    )
    base_currency = models.CharField(max_length=3)
    quote_currency = models.CharField(max_length=3)
    source = models.CharField(max_length=10, choices=RateSource.choices)
    previous_rate = models.DecimalField(max_digits=14, decimal_places=4)
    new_rate = models.DecimalField(max_digits=14, decimal_places=4)

    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="rate_changes",
    )
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-changed_at", "-id"]
        verbose_name = "historique de taux"

    def __str__(self):
        return (
            f"{self.base_currency}/{self.quote_currency} "
            f"{self.previous_rate} → {self.new_rate}"
        )
