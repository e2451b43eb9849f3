# core/constants.py

from django.db import models


class Currency(models.TextChoices):
    USD = "USD", "Dollar US"
    CUP = "CUP", "Peso cubain"


class RateCurrency(models.TextChoices):
    USD = "USD", "Dollar US"
    EUR = "EUR", "Euro"
    MLC = "MLC", "Monnaie librement convertible"
    CUP = "CUP", "Peso cubain"


# Devise de référence des commandes (montant envoyé)
SOURCE_CURRENCY = Currency.USD
LOCAL_CURRENCY = Currency.CUP
