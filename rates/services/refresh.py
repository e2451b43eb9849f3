# rates/services/refresh.py

import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from core.constants import RateCurrency
from rates.models import ExchangeRate, ExchangeRateHistory, RateSource

logger = logging.getLogger(__name__)

RATE_PLACES = Decimal("0.0001")


def _clean_rate(value, field="rate"):
    if isinstance(value, bool):
        raise ValidationError({field: "Le taux doit être numérique."})

    try:
        rate = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field: "Le taux doit être numérique."})

    if not rate.is_finite() or rate <= 0:
        raise ValidationError({field: "Le taux doit être strictement positif."})

    return rate.quantize(RATE_PLACES)


def _clean_currency(code, field):
    code = str(code or "").upper()
    if code not in RateCurrency.values:
        raise ValidationError({field: f"Devise inconnue : {code}"})
    return code


# ============================================================
# ÉCRITURE D'UN TAUX ACTIF
# ============================================================

def _locked_active(base, quote, source):
    return (
        ExchangeRate.objects
        .select_for_update()
        .filter(
            base_currency=base,
            quote_currency=quote,
            source=source,
            active=True,
        )
        .first()
    )


@transaction.atomic
def set_rate(base, quote, rate, source=RateSource.MANUAL, actor=None):
    """
    Écrit le taux actif de (paire, source).

    Tout changement de valeur d'un taux déjà actif ajoute une ligne
    d'historique dans la même transaction.
    """

    base = _clean_currency(base, "base_currency")
    quote = _clean_currency(quote, "quote_currency")
    rate = _clean_rate(rate)

    if base == quote:
        raise ValidationError({"quote_currency": "La paire doit comporter deux devises distinctes."})

    current = _locked_active(base, quote, source)

    if current is None:
        try:
            with transaction.atomic():
                created = ExchangeRate.objects.create(
                    base_currency=base,
                    quote_currency=quote,
                    rate=rate,
                    source=source,
                    active=True,
                    updated_by=actor,
                )
        except IntegrityError:
            # Création concurrente de la même paire : on reprend la ligne gagnante
            current = _locked_active(base, quote, source)
            if current is None:
                raise
            logger.warning("Taux %s/%s (%s) créé en parallèle, mise à jour", base, quote, source)
        else:
            logger.info("Taux %s/%s (%s) créé : %s", base, quote, source, rate)
            return created

    if current.rate == rate:
        return current

    previous = current.rate

    current.rate = rate
    current.updated_by = actor
    current.save(update_fields=["rate", "updated_by", "updated_at"])

    ExchangeRateHistory.objects.create(
        exchange_rate=current,
        base_currency=base,
        quote_currency=quote,
        source=source,
        previous_rate=previous,
        new_rate=rate,
        changed_by=actor,
    )

    logger.info(
        "Taux %s/%s (%s) : %s → %s", base, quote, source, previous, rate
    )
    return current


@transaction.atomic
def clear_rate(base, quote, source=RateSource.MANUAL, actor=None):
    """
    Désactive le taux actif de (paire, source) ; la résolution retombe
    sur la source suivante. Retourne le nombre de lignes désactivées.
    """

    rates = list(
        ExchangeRate.objects
        .select_for_update()
        .filter(
            base_currency=str(base).upper(),
            quote_currency=str(quote).upper(),
            source=source,
            active=True,
        )
    )

    for rate in rates:
        rate.active = False
        rate.updated_by = actor
        rate.save(update_fields=["active", "updated_by", "updated_at"])

    return len(rates)


# ============================================================
# RAFRAÎCHISSEMENT DEPUIS UNE SOURCE EXTERNE
# ============================================================

@transaction.atomic
def refresh_rates(quotes, source, quote_currency="CUP", actor=None):
    """
    Persiste un lot de cotations {devise: taux} d'une source externe.

    Seule la forme est validée (taux numérique positif) ; un lot invalide
    est rejeté en entier.
    """

    if source == RateSource.MANUAL:
        raise ValidationError({"source": "Une source externe est requise."})

    if not isinstance(quotes, dict) or not quotes:
        raise ValidationError({"quotes": "Aucune cotation fournie."})

    cleaned = {
        _clean_currency(code, "quotes"): _clean_rate(value, field=f"quotes.{code}")
        for code, value in quotes.items()
    }

    return {
        code: set_rate(code, quote_currency, value, source=source, actor=actor)
        for code, value in cleaned.items()
    }
