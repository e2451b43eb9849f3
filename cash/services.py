# cash/services.py
"""
Journal espèces des livreurs.

Chaque écriture verrouille la ligne du livreur (qui couvre les deux
devises), calcule le solde après, refuse tout solde négatif, puis écrit
le mouvement et le solde en cache dans la même transaction.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import ValidationError

from accounts.constants import UserRole
from cash.models import CashMovement, MovementKind
from core.constants import Currency
from core.exceptions import CourierInactive, InsufficientBalance

logger = logging.getLogger(__name__)

User = get_user_model()

MONEY = Decimal("0.01")

BALANCE_FIELDS = {
    Currency.USD: "balance_usd",
    Currency.CUP: "balance_cup",
}


# ============================================================
# OUTILS
# ============================================================

def _clean_amount(value, field="amount"):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field: "Montant numérique attendu."})

    if not amount.is_finite() or amount <= 0:
        raise ValidationError({field: "Le montant doit être strictement positif."})

    return amount.quantize(MONEY, rounding=ROUND_HALF_UP)


def _clean_currency(currency):
    currency = str(currency or "").upper()
    if currency not in BALANCE_FIELDS:
        raise ValidationError({"currency": f"Devise inconnue : {currency}"})
    return currency


def _lock_courier(courier, require_active=True):
    courier_id = getattr(courier, "pk", courier)
    locked = (
        User.objects.select_for_update()
        .filter(pk=courier_id, role=UserRole.COURIER, is_superuser=False)
        .first()
    )

    if locked is None or (require_active and not locked.is_active):
        raise CourierInactive(courier_id)

    return locked


def _write(courier, kind, currency, amount, sign, actor=None, **extra):
    field = BALANCE_FIELDS[currency]
    before = getattr(courier, field)
    after = before + sign * amount

    if after < 0:
        logger.warning(
            "Mouvement %s refusé pour le livreur %s : %s %s demandés, %s disponibles",
            kind,
            courier.pk,
            amount,
            currency,
            before,
        )
        raise InsufficientBalance(courier.pk, currency, before, amount)

    setattr(courier, field, after)
    courier.save(update_fields=[field])

    movement = CashMovement.objects.create(
        courier=courier,
        kind=kind,
        currency=currency,
        amount=amount,
        balance_before=before,
        balance_after=after,
        recorded_by=actor,
        **extra,
    )

    logger.info(
        "Livreur %s : %s %s %s (solde %s → %s)",
        courier.pk,
        kind,
        amount,
        currency,
        before,
        after,
    )
    return movement


# ============================================================
# ÉCRITURES
# ============================================================

@transaction.atomic
def allocate(courier, currency, amount, actor=None, notes=""):
    courier = _lock_courier(courier)
    return _write(
        courier,
        MovementKind.ALLOCATION,
        _clean_currency(currency),
        _clean_amount(amount),
        1,
        actor=actor,
        notes=notes,
    )


@transaction.atomic
def withdraw(courier, currency, amount, actor=None, notes=""):
    courier = _lock_courier(courier, require_active=False)
    return _write(
        courier,
        MovementKind.WITHDRAWAL,
        _clean_currency(currency),
        _clean_amount(amount),
        -1,
        actor=actor,
        notes=notes,
    )


@transaction.atomic
def record_pickup(courier, currency, amount, actor=None, notes="", remittance=None):
    courier = _lock_courier(courier)
    return _write(
        courier,
        MovementKind.PICKUP,
        _clean_currency(currency),
        _clean_amount(amount),
        1,
        actor=actor,
        notes=notes,
        remittance=remittance,
    )


@transaction.atomic
def record_delivery(courier, remittance, actor=None):
    """
    Débit de livraison. Appelé par la transition DELIVERED uniquement ;
    le livreur peut avoir été désactivé depuis l'assignation.
    """

    courier = _lock_courier(courier, require_active=False)
    return _write(
        courier,
        MovementKind.DELIVERY,
        _clean_currency(remittance.delivery_currency),
        _clean_amount(remittance.delivery_amount, "delivery_amount"),
        -1,
        actor=actor,
        remittance=remittance,
        notes=f"Livraison {remittance.tracking_code}",
    )


@transaction.atomic
def sell_currency(courier, usd_amount, exchange_rate, actor=None, notes=""):
    """
    Vente de devises par le livreur : débit USD, crédit CUP de
    usd_amount × taux. Les deux jambes ou aucune.
    """

    usd_amount = _clean_amount(usd_amount, "usd_amount")

    try:
        rate = Decimal(str(exchange_rate))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({"exchange_rate": "Taux numérique attendu."})
    if not rate.is_finite() or rate <= 0:
        raise ValidationError({"exchange_rate": "Le taux doit être strictement positif."})

    cup_amount = (usd_amount * rate).quantize(MONEY, rounding=ROUND_HALF_UP)

    courier = _lock_courier(courier)

    usd_leg = _write(
        courier,
        MovementKind.CURRENCY_SALE,
        Currency.USD,
        usd_amount,
        -1,
        actor=actor,
        exchange_rate=rate,
        notes=notes,
    )
    cup_leg = _write(
        courier,
        MovementKind.CURRENCY_SALE,
        Currency.CUP,
        cup_amount,
        1,
        actor=actor,
        exchange_rate=rate,
        counterpart=usd_leg,
        notes=notes,
    )

    return usd_leg, cup_leg


# ============================================================
# CONTRÔLE
# ============================================================

def courier_balance_from_log(courier, currency):
    """Solde recalculé en repliant le journal."""

    currency = _clean_currency(currency)
    movements = CashMovement.objects.filter(
        courier_id=getattr(courier, "pk", courier),
        currency=currency,
    ).order_by("id")

    balance = Decimal("0.00")
    for movement in movements:
        balance += movement.signed_amount
    return balance


def reconcile_courier(courier):
    """
    Compare, par devise, le solde en cache, le solde replié depuis le
    journal et le dernier balance_after.
    """

    courier = User.objects.get(pk=getattr(courier, "pk", courier))
    report = {}

    for currency, field in BALANCE_FIELDS.items():
        cached = getattr(courier, field)
        from_log = courier_balance_from_log(courier, currency)
        last = (
            CashMovement.objects
            .filter(courier=courier, currency=currency)
            .order_by("-id")
            .values_list("balance_after", flat=True)
            .first()
        )
        if last is None:
            last = Decimal("0.00")

        report[str(currency)] = {
            "cached": cached,
            "from_log": from_log,
            "last_balance_after": last,
            "consistent": cached == from_log == last,
        }

    return report
