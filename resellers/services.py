# resellers/services.py

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Sum
from rest_framework.exceptions import ValidationError

from accounts.constants import UserRole
from core.exceptions import InsufficientBalance
from remittances.state_machine import RemittanceState
from resellers.models import ResellerPayment

logger = logging.getLogger(__name__)

User = get_user_model()

MONEY = Decimal("0.01")


def _money(value, field="amount"):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field: "Montant numérique attendu."})
    if not amount.is_finite():
        raise ValidationError({field: "Montant numérique attendu."})
    return amount.quantize(MONEY, rounding=ROUND_HALF_UP)


def _lock_reseller(reseller):
    reseller_id = getattr(reseller, "pk", reseller)
    locked = User.objects.select_for_update().filter(pk=reseller_id, role=UserRole.RESELLER).first()
    if locked is None:
        raise ValidationError({"reseller": f"Revendeur introuvable : {reseller_id}"})
    return locked


# ============================================================
# COMMISSION
# ============================================================

@transaction.atomic
def accrue(reseller, amount, remittance=None):
    """
    Crédite la commission en attente. Appelé à la livraison d'une
    remise revendeur ; réussit pour tout montant >= 0.
    """

    amount = _money(amount)
    if amount < 0:
        raise ValidationError({"amount": "La commission ne peut pas être négative."})

    reseller = _lock_reseller(reseller)
    reseller.pending_balance += amount
    reseller.save(update_fields=["pending_balance"])

    logger.info(
        "Revendeur %s : commission +%s (%s) → %s",
        reseller.pk,
        amount,
        getattr(remittance, "tracking_code", "-"),
        reseller.pending_balance,
    )
    return reseller.pending_balance


# ============================================================
# PAIEMENT
# ============================================================

@transaction.atomic
def record_payment(reseller, amount, method, reference="", notes="", actor=None):
    amount = _money(amount)
    if amount <= 0:
        raise ValidationError({"amount": "Le montant doit être strictement positif."})

    method = (method or "").strip()
    if len(method) < 2:
        raise ValidationError({"method": "Moyen de paiement requis."})

    reseller = _lock_reseller(reseller)
    before = reseller.pending_balance

    if amount > before:
        logger.warning(
            "Paiement refusé au revendeur %s : %s demandés, %s dus",
            reseller.pk,
            amount,
            before,
        )
        raise InsufficientBalance(reseller.pk, "USD", before, amount)

    reseller.pending_balance = before - amount
    reseller.save(update_fields=["pending_balance"])

    payment = ResellerPayment.objects.create(
        reseller=reseller,
        amount=amount,
        method=method,
        reference=reference or "",
        notes=notes or "",
        balance_before=before,
        balance_after=reseller.pending_balance,
        recorded_by=actor,
    )

    logger.info("Revendeur %s : paiement %s (%s)", reseller.pk, amount, method)
    return payment


def reseller_summary(reseller):
    """Commission en attente, total versé, total gagné sur les remises livrées."""

    paid = (
        ResellerPayment.objects
        .filter(reseller=reseller)
        .aggregate(total=Sum("amount"))
        .get("total")
    ) or Decimal("0.00")

    earned = (
        reseller.reseller_remittances
        .filter(state__in=[RemittanceState.DELIVERED, RemittanceState.INVOICED])
        .aggregate(total=Sum("reseller_commission"))
        .get("total")
    ) or Decimal("0.00")

    return {
        "reseller": reseller.pk,
        "pending_balance": reseller.pending_balance,
        "commission_rate": reseller.commission_rate,
        "uses_logistics": reseller.uses_logistics,
        "total_paid": paid,
        "total_earned": earned,
    }
