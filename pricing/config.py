# pricing/config.py

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.conf import settings

from pricing.models import BusinessSetting

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricingConfig:
    local_discount_per_unit: Decimal
    hard_currency_fee_percent: Decimal
    default_reseller_rate: Decimal
    min_amount: Decimal
    max_amount: Decimal


SETTING_FIELDS = {
    "LOCAL_DISCOUNT_PER_UNIT": "local_discount_per_unit",
    "HARD_CURRENCY_FEE_PERCENT": "hard_currency_fee_percent",
    "DEFAULT_RESELLER_RATE": "default_reseller_rate",
    "MIN_AMOUNT": "min_amount",
    "MAX_AMOUNT": "max_amount",
}


def _decimal(value):
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not number.is_finite() or number < 0:
        return None
    return number


def pricing_config_from(values):
    """Construit la configuration depuis un dict {CLE: valeur}."""

    fields = {}
    for key, field in SETTING_FIELDS.items():
        number = _decimal(values.get(key))
        if number is None:
            raise ValueError(f"Règle métier invalide : {key}={values.get(key)!r}")
        fields[field] = number
    return PricingConfig(**fields)


def load_pricing_config():
    """
    Valeurs de settings.REMITTANCE_PRICING, surchargées par les
    BusinessSetting en base. Une surcharge illisible est ignorée.
    """

    values = dict(settings.REMITTANCE_PRICING)

    for row in BusinessSetting.objects.filter(key__in=SETTING_FIELDS.keys()):
        if _decimal(row.value) is None:
            logger.warning("Règle métier %s ignorée : valeur %r invalide", row.key, row.value)
            continue
        values[row.key] = row.value

    return pricing_config_from(values)
