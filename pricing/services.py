# pricing/services.py

from core.constants import SOURCE_CURRENCY, LOCAL_CURRENCY
from pricing.calculator import calculate
from pricing.config import load_pricing_config
from pricing.models import CommissionTier
from rates.services.resolver import resolve_rate


def active_tiers():
    return list(CommissionTier.objects.filter(active=True).order_by("range_min"))


def quote_for(amount, delivery_type, reseller=None):
    """
    Devis complet à partir de l'état courant (tranches actives, taux
    résolu, règles métier). Lecture seule.
    """

    rate = resolve_rate(SOURCE_CURRENCY, LOCAL_CURRENCY)
    reseller_rate = reseller.commission_rate if reseller is not None else None

    return calculate(
        amount,
        delivery_type,
        active_tiers(),
        rate,
        load_pricing_config(),
        reseller_rate=reseller_rate,
    )
