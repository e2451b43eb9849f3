# disputes/services.py
"""
Litiges sur les remises.

Même discipline que le cycle de vie des remises : ligne du litige
verrouillée, transition contrôlée sur l'état verrouillé, écriture du
statut et de son fil d'activité dans la même transaction.

Un remboursement accordé est passé en dépense au journal comptable
dans la transaction de résolution.
"""

import logging
import secrets
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.db.models import Count
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from accounting.models import MovementKind
from accounting.services import record as record_accounting
from accounts.constants import UserRole
from core.exceptions import InvalidStateTransition
from disputes.models import (
    ALLOWED_TRANSITIONS,
    CLOSED_STATUSES,
    KIND_RULES,
    REFUND_RESOLUTIONS,
    CommentKind,
    Dispute,
    DisputeComment,
    DisputeKind,
    DisputePriority,
    DisputeStatus,
    ResolutionType,
    sla_deadline,
)
from pricing.calculator import money
from remittances.models import Remittance
from remittances.services.tracking import TRACKING_ALPHABET
from remittances.state_machine import RemittanceState

logger = logging.getLogger(__name__)

DISPUTABLE_STATES = (RemittanceState.DELIVERED, RemittanceState.INVOICED)

MAX_NUMBER_ATTEMPTS = 20


# ============================================================
# OUTILS
# ============================================================

def generate_dispute_number(today=None):
    today = today or timezone.localdate()
    suffix = "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(4))
    return f"DIS-{today:%Y%m%d}-{suffix}"


def _lock(dispute):
    pk = getattr(dispute, "pk", dispute)
    try:
        return Dispute.objects.select_for_update().select_related("remittance").get(pk=pk)
    except Dispute.DoesNotExist:
        raise ValidationError({"dispute": f"Litige introuvable : {pk}"})


def _comment(dispute, author, content, kind=CommentKind.COMMENT, internal=False):
    return DisputeComment.objects.create(
        dispute=dispute,
        author=author,
        kind=kind,
        content=content,
        internal=internal,
    )


def _check(dispute, target):
    if target not in ALLOWED_TRANSITIONS.get(dispute.status, []):
        raise InvalidStateTransition(dispute.status, target, dispute=dispute.number)


def _set_status(dispute, target, actor, update_fields=()):
    previous = dispute.status
    dispute.status = target
    dispute.save(update_fields=["status", "updated_at", *update_fields])

    _comment(
        dispute,
        actor,
        f"Statut : {previous} → {target}",
        kind=CommentKind.STATUS_CHANGE,
        internal=True,
    )
    logger.info("Litige %s : %s → %s", dispute.number, previous, target)
    return dispute


def _clean_refund(value, ceiling):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({"refund_amount": "Montant numérique attendu."})

    if not amount.is_finite() or amount <= 0:
        raise ValidationError({"refund_amount": "Le montant doit être strictement positif."})

    amount = money(amount)
    if amount > ceiling:
        raise ValidationError({
            "refund_amount": f"Le remboursement ne peut pas dépasser le montant encaissé ({ceiling})."
        })
    return amount


# ============================================================
# OUVERTURE
# ============================================================

@transaction.atomic
def open_dispute(remittance, kind, description, actor, priority=None):
    """
    Ouvre un litige sur une remise livrée ou facturée.

    L'administrateur peut ouvrir sur toute remise, le revendeur sur les
    siennes uniquement. Priorité et échéance découlent du type.
    """

    pk = getattr(remittance, "pk", remittance)
    remittance = Remittance.objects.filter(pk=pk).first()
    if remittance is None:
        raise ValidationError({"remittance": f"Remise introuvable : {pk}"})

    if not actor.is_admin and not (
        actor.role == UserRole.RESELLER and remittance.reseller_id == actor.pk
    ):
        raise PermissionDenied("Litige réservé à l'administrateur et au revendeur de la remise.")

    if remittance.state not in DISPUTABLE_STATES:
        raise ValidationError({
            "remittance": f"Seule une remise livrée ou facturée peut faire l'objet d'un litige ({remittance.state})."
        })

    if kind not in DisputeKind.values:
        raise ValidationError({"kind": f"Type de litige inconnu : {kind}"})
    if priority and priority not in DisputePriority.values:
        raise ValidationError({"priority": f"Priorité inconnue : {priority}"})

    description = (description or "").strip()
    if not description:
        raise ValidationError({"description": "Description obligatoire."})

    default_priority, _ = KIND_RULES[kind]
    now = timezone.now()

    for attempt in range(1, MAX_NUMBER_ATTEMPTS + 1):
        number = generate_dispute_number()
        try:
            with transaction.atomic():
                dispute = Dispute.objects.create(
                    number=number,
                    remittance=remittance,
                    kind=kind,
                    priority=priority or default_priority,
                    description=description,
                    reported_by=actor,
                    deadline=sla_deadline(kind, now),
                )
            break
        except IntegrityError:
            if not Dispute.objects.filter(number=number).exists():
                raise
            logger.warning("Numéro de litige %s déjà pris (essai %s)", number, attempt)
    else:
        raise ValidationError({"number": "Aucun numéro de litige libre, réessayer."})

    _comment(dispute, actor, f"Litige ouvert : {description}", kind=CommentKind.SYSTEM)

    logger.info(
        "Litige %s ouvert sur %s (%s, %s)",
        dispute.number,
        remittance.tracking_code,
        kind,
        dispute.priority,
    )
    return dispute


# ============================================================
# TRAITEMENT
# ============================================================

@transaction.atomic
def change_status(dispute, target, actor, note=""):
    """Étapes intermédiaires ; la clôture passe par resolve / reject."""

    dispute = _lock(dispute)

    if target in CLOSED_STATUSES:
        raise ValidationError({"status": "Clôture par résolution ou rejet uniquement."})

    _check(dispute, target)
    _set_status(dispute, target, actor)

    note = (note or "").strip()
    if note:
        _comment(dispute, actor, note, internal=True)
    return dispute


@transaction.atomic
def assign_dispute(dispute, assignee, actor):
    dispute = _lock(dispute)

    if dispute.is_closed:
        raise ValidationError({"dispute": f"Litige {dispute.number} clos."})
    if assignee is None or not assignee.is_active or not assignee.is_admin:
        raise ValidationError({"assigned_to": "Le litige s'assigne à un administrateur actif."})

    dispute.assigned_to = assignee
    dispute.save(update_fields=["assigned_to", "updated_at"])

    _comment(
        dispute,
        actor,
        f"Assigné à {assignee.get_full_name() or assignee.username}",
        kind=CommentKind.ASSIGNMENT,
        internal=True,
    )
    return dispute


@transaction.atomic
def resolve_dispute(dispute, actor, resolution, resolution_type, refund_amount=None):
    """
    Clôt le litige en faveur du client ou sans suite.

    - remboursement total : montant encaissé de la remise
    - remboursement partiel, compensation : montant obligatoire, plafonné
      au montant encaissé
    - autres résolutions : aucun montant
    """

    dispute = _lock(dispute)
    _check(dispute, DisputeStatus.RESOLVED)

    resolution = (resolution or "").strip()
    if not resolution:
        raise ValidationError({"resolution": "Motif de résolution obligatoire."})
    if resolution_type not in ResolutionType.values:
        raise ValidationError({"resolution_type": f"Type de résolution inconnu : {resolution_type}"})

    ceiling = dispute.remittance.total_charged

    if resolution_type == ResolutionType.FULL_REFUND:
        if refund_amount is not None and _clean_refund(refund_amount, ceiling) != ceiling:
            raise ValidationError({"refund_amount": f"Un remboursement total vaut {ceiling}."})
        refund_amount = ceiling
    elif resolution_type in REFUND_RESOLUTIONS:
        if refund_amount is None:
            raise ValidationError({"refund_amount": "Montant obligatoire pour cette résolution."})
        refund_amount = _clean_refund(refund_amount, ceiling)
    elif refund_amount is not None:
        raise ValidationError({"refund_amount": "Aucun montant pour cette résolution."})

    dispute.resolution = resolution
    dispute.resolution_type = resolution_type
    dispute.refund_amount = refund_amount
    dispute.resolved_by = actor
    dispute.resolved_at = timezone.now()
    _set_status(
        dispute,
        DisputeStatus.RESOLVED,
        actor,
        ["resolution", "resolution_type", "refund_amount", "resolved_by", "resolved_at"],
    )

    if refund_amount:
        record_accounting(
            MovementKind.EXPENSE,
            f"Remboursement litige {dispute.number} ({dispute.remittance.tracking_code})",
            refund_amount,
            remittance=dispute.remittance,
            actor=actor,
        )

    return dispute


@transaction.atomic
def reject_dispute(dispute, actor, resolution):
    dispute = _lock(dispute)
    _check(dispute, DisputeStatus.REJECTED)

    resolution = (resolution or "").strip()
    if not resolution:
        raise ValidationError({"resolution": "Motif de rejet obligatoire."})

    dispute.resolution = resolution
    dispute.resolution_type = ResolutionType.NO_ACTION
    dispute.resolved_by = actor
    dispute.resolved_at = timezone.now()
    return _set_status(
        dispute,
        DisputeStatus.REJECTED,
        actor,
        ["resolution", "resolution_type", "resolved_by", "resolved_at"],
    )


def add_comment(dispute, author, content, internal=False):
    content = (content or "").strip()
    if not content:
        raise ValidationError({"content": "Commentaire vide."})

    # seul l'administrateur écrit des notes internes
    return _comment(dispute, author, content, internal=bool(internal and author.is_admin))


# ============================================================
# SUIVI
# ============================================================

def dispute_stats(queryset=None, now=None):
    qs = queryset if queryset is not None else Dispute.objects.all()
    now = now or timezone.now()

    by_status = {
        row["status"]: row["total"]
        for row in qs.values("status").annotate(total=Count("id")).order_by()
    }
    active = qs.exclude(status__in=CLOSED_STATUSES)

    return {
        "by_status": {status: by_status.get(status, 0) for status in DisputeStatus.values},
        "active": active.count(),
        "overdue": active.filter(deadline__lt=now).count(),
        "urgent": active.filter(priority=DisputePriority.URGENT).count(),
    }
