# accounting/services.py

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.db.models import Sum
from rest_framework.exceptions import ValidationError

from accounting.models import AccountingMovement, MovementKind

logger = logging.getLogger(__name__)


def record(kind, concept, amount, remittance=None, actor=None):
    try:
        amount = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({"amount": "Montant numérique attendu."})

    if not amount.is_finite() or amount <= 0:
        raise ValidationError({"amount": "Le montant doit être strictement positif."})

    if kind not in MovementKind.values:
        raise ValidationError({"kind": f"Type d'écriture inconnu : {kind}"})

    movement = AccountingMovement.objects.create(
        kind=kind,
        concept=concept,
        amount=amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
        remittance=remittance,
        recorded_by=actor,
    )

    logger.info("Écriture %s %s : %s", kind, movement.amount, concept)
    return movement


def journal_totals(queryset=None):
    qs = queryset if queryset is not None else AccountingMovement.objects.all()

    totals = {
        row["kind"]: row["total"]
        for row in qs.values("kind").annotate(total=Sum("amount")).order_by()
    }
    income = totals.get(MovementKind.INCOME) or Decimal("0.00")
    expense = totals.get(MovementKind.EXPENSE) or Decimal("0.00")

    return {
        "income": income,
        "expense": expense,
        "net": income - expense,
    }
