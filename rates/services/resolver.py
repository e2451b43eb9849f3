# rates/services/resolver.py

from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings

from core.exceptions import RateUnavailable
from rates.models import ExchangeRate, RateSource


# Ordre de résolution : saisie manuelle, source principale, source secondaire
SOURCE_PRIORITY = (
    RateSource.MANUAL,
    RateSource.PRIMARY,
    RateSource.SECONDARY,
)

FALLBACK_SOURCE = "FALLBACK"


@dataclass(frozen=True)
class ResolvedRate:
    base_currency: str
    quote_currency: str
    rate: Decimal
    source: str


def fallback_multipliers():
    raw = settings.EXCHANGE_RATES.get("FALLBACK_MULTIPLIERS", {})
    return {code.upper(): Decimal(str(value)) for code, value in raw.items()}


def _active_rate(base, quote):
    for source in SOURCE_PRIORITY:
        found = (
            ExchangeRate.objects
            .filter(
                base_currency=base,
                quote_currency=quote,
                source=source,
                active=True,
            )
            .order_by("-updated_at", "-id")
            .first()
        )
        if found:
            return found
    return None


# ============================================================
# RÉSOLUTION (lecture seule)
# ============================================================

def resolve(base="USD", quote="CUP"):
    """
    Taux à appliquer à une nouvelle commande.

    Le ratio statique n'est utilisé que pour une devise autre que l'USD,
    quand aucune source n'a la paire : taux USD × multiplicateur configuré.
    """

    base = base.upper()
    quote = quote.upper()

    if base == quote:
        return ResolvedRate(base, quote, Decimal("1"), RateSource.MANUAL)

    found = _active_rate(base, quote)
    if found:
        return ResolvedRate(base, quote, found.rate, found.source)

    multiplier = fallback_multipliers().get(base)
    if base != "USD" and multiplier is not None:
        usd = _active_rate("USD", quote)
        if usd:
            return ResolvedRate(
                base,
                quote,
                (usd.rate * multiplier).quantize(Decimal("0.0001")),
                FALLBACK_SOURCE,
            )

    raise RateUnavailable(base, quote)


def resolve_rate(base="USD", quote="CUP"):
    return resolve(base, quote).rate


def current_rates(quote="CUP"):
    """
    Taux résolu de chaque devise de base, les paires sans taux sont omises.
    """

    result = {}
    for base in ("USD", "EUR", "MLC"):
        try:
            result[base] = resolve(base, quote)
        except RateUnavailable:
            continue
    return result
