# pricing/calculator.py
"""
Calcul des montants d'une remise.

Fonction pure : mêmes entrées, même résultat. Aucune lecture d'horloge,
de base de données ou d'aléa ; les tranches, le taux et la configuration
sont fournis par l'appelant.
"""

from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from rest_framework.exceptions import ValidationError

from core.constants import Currency
from core.exceptions import NoTierForAmount
from pricing.models import DeliveryType

MONEY = Decimal("0.01")
HUNDRED = Decimal("100")


def money(value):
    return Decimal(value).quantize(MONEY, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Quote:
    amount_sent: Decimal
    delivery_type: str
    delivery_amount: Decimal
    delivery_currency: str
    exchange_rate: Decimal
    commission_percentage: Decimal
    commission_fixed: Decimal
    total_commission: Decimal
    total_charged: Decimal
    platform_commission: Optional[Decimal] = None
    reseller_commission: Optional[Decimal] = None

    def as_dict(self):
        return asdict(self)


def _decimal(value, field):
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field: "Valeur numérique attendue."})
    if not number.is_finite():
        raise ValidationError({field: "Valeur numérique attendue."})
    return number


# ============================================================
# TRANCHES
# ============================================================

def select_tier(amount, tiers):
    """
    Tranche active unique contenant le montant.

    `tiers` : CommissionTier ou tout objet exposant range_min, range_max,
    percentage, fixed_fee, active et name.
    """

    matches = [
        tier for tier in tiers
        if tier.active
        and amount >= tier.range_min
        and (tier.range_max is None or amount < tier.range_max)
    ]

    if not matches:
        raise NoTierForAmount(amount)

    if len(matches) > 1:
        names = sorted(tier.name for tier in matches)
        raise NoTierForAmount(
            amount,
            detail=f"Tranches actives qui se chevauchent pour {amount} : {', '.join(names)}",
            tiers=names,
        )

    return matches[0]


# ============================================================
# CALCUL
# ============================================================

def calculate(amount, delivery_type, tiers, rate, config, reseller_rate=None):
    """
    - LOCAL : livraison CUP = montant × taux − remise unitaire × montant,
      commission selon la tranche
    - HARD : livraison USD = montant, commission au pourcentage fixe
    - revendeur : la part du revendeur (taux personnel) est prélevée sur
      la commission, le reste revient à la plateforme
    """

    amount = money(_decimal(amount, "amount_sent"))
    rate = _decimal(rate, "exchange_rate")

    if amount <= 0:
        raise ValidationError({"amount_sent": "Le montant doit être strictement positif."})

    if amount < config.min_amount or amount > config.max_amount:
        raise ValidationError({
            "amount_sent": (
                f"Le montant doit être compris entre "
                f"{config.min_amount} et {config.max_amount}."
            )
        })

    if rate <= 0:
        raise ValidationError({"exchange_rate": "Le taux doit être strictement positif."})

    if delivery_type == DeliveryType.LOCAL:
        tier = select_tier(amount, tiers)
        percentage = Decimal(tier.percentage)
        fixed = Decimal(tier.fixed_fee)
        delivery_amount = money(amount * rate - config.local_discount_per_unit * amount)
        delivery_currency = Currency.CUP

    elif delivery_type == DeliveryType.HARD:
        percentage = config.hard_currency_fee_percent
        fixed = Decimal("0")
        delivery_amount = amount
        delivery_currency = Currency.USD

    else:
        raise ValidationError({"delivery_type": f"Type de livraison inconnu : {delivery_type}"})

    if delivery_amount <= 0:
        raise ValidationError({
            "delivery_amount": "Le montant à livrer doit être strictement positif."
        })

    total_commission = money(amount * percentage / HUNDRED + fixed)
    total_charged = money(amount + total_commission)

    platform_commission = None
    reseller_commission = None

    if reseller_rate is not None:
        reseller_rate = _decimal(reseller_rate, "commission_rate")
        if reseller_rate < 0:
            raise ValidationError({"commission_rate": "Le taux revendeur ne peut pas être négatif."})

        reseller_commission = min(money(amount * reseller_rate / HUNDRED), total_commission)
        platform_commission = total_commission - reseller_commission

    return Quote(
        amount_sent=amount,
        delivery_type=str(delivery_type),
        delivery_amount=delivery_amount,
        delivery_currency=str(delivery_currency),
        exchange_rate=rate,
        commission_percentage=money(percentage),
        commission_fixed=money(fixed),
        total_commission=total_commission,
        total_charged=total_charged,
        platform_commission=platform_commission,
        reseller_commission=reseller_commission,
    )
