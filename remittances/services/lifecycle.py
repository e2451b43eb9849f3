# remittances/services/lifecycle.py
"""
Cycle de vie d'une remise.

Chaque transition verrouille la ligne de la remise (select_for_update),
contrôle la transition sur l'état verrouillé, écrit l'état et ses
effets dans la même transaction, puis notifie après commit.

Ordre des verrous : remise, puis utilisateurs par id croissant.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from accounting.models import MovementKind
from accounting.services import record as record_accounting
from accounts.constants import UserRole
from cash.services import record_delivery
from core.exceptions import CourierInactive, DuplicateTrackingCode
from pricing.services import quote_for
from remittances.models import Remittance
from remittances.services.tracking import generate_tracking_code
from remittances.signals import remittance_state_changed
from remittances.state_machine import RemittanceState, check_transition
from resellers.services import accrue

logger = logging.getLogger(__name__)

User = get_user_model()

MAX_TRACKING_ATTEMPTS = 20

PARTY_FIELDS = (
    "sender_name",
    "sender_phone",
    "beneficiary_name",
    "beneficiary_phone",
    "beneficiary_address",
    "province",
    "municipality",
    "notes",
)


# ============================================================
# OUTILS
# ============================================================

def _lock(remittance):
    pk = getattr(remittance, "pk", remittance)
    try:
        return Remittance.objects.select_for_update().get(pk=pk)
    except Remittance.DoesNotExist:
        raise ValidationError({"remittance": f"Remise introuvable : {pk}"})


def _lock_users(*users):
    """Verrouille les utilisateurs par id croissant."""

    ids = sorted({getattr(user, "pk", user) for user in users if user is not None})
    locked = User.objects.select_for_update().filter(pk__in=ids).order_by("pk")
    return {user.pk: user for user in locked}


def _notify(remittance, previous_state, actor):
    new_state = remittance.state

    def send():
        results = remittance_state_changed.send_robust(
            sender=Remittance,
            remittance=remittance,
            previous_state=previous_state,
            new_state=new_state,
            actor=actor,
        )
        for receiver, response in results:
            if isinstance(response, Exception):
                logger.error(
                    "Notification %s en échec (%s) : %s",
                    remittance.tracking_code,
                    getattr(receiver, "__name__", receiver),
                    response,
                )

    transaction.on_commit(send)


def _apply_transition(remittance, target, actor, update_fields=()):
    previous = remittance.state
    remittance.state = target
    remittance.save(update_fields=["state", "updated_at", *update_fields])

    logger.info(
        "Remise %s : %s → %s",
        remittance.tracking_code,
        previous,
        target,
    )
    _notify(remittance, previous, actor)
    return remittance


def _append_note(remittance, text):
    text = (text or "").strip()
    if not text:
        return
    remittance.notes = f"{remittance.notes}\n{text}".strip() if remittance.notes else text


# ============================================================
# CRÉATION
# ============================================================

def _create_with_unique_code(fields, code_factory):
    for attempt in range(1, MAX_TRACKING_ATTEMPTS + 1):
        code = code_factory()
        try:
            with transaction.atomic():
                return Remittance.objects.create(tracking_code=code, **fields)
        except IntegrityError:
            if not Remittance.objects.filter(tracking_code=code).exists():
                raise
            logger.warning("Code de suivi %s déjà pris (essai %s)", code, attempt)

    raise DuplicateTrackingCode(
        f"Aucun code de suivi libre après {MAX_TRACKING_ATTEMPTS} essais"
    )


@transaction.atomic
def create_remittance(data, actor=None, reseller=None, is_request=False, code_factory=generate_tracking_code):
    """
    Crée une remise chiffrée.

    - demande publique (is_request) : état REQUEST, sans créateur
    - personnel / revendeur : état PENDING
    Aucun effet sur les journaux.
    """

    quote = quote_for(data.get("amount_sent"), data.get("delivery_type"), reseller=reseller)

    fields = {field: data.get(field) or "" for field in PARTY_FIELDS}
    fields.update(
        amount_sent=quote.amount_sent,
        exchange_rate_applied=quote.exchange_rate,
        delivery_type=quote.delivery_type,
        delivery_amount=quote.delivery_amount,
        delivery_currency=quote.delivery_currency,
        commission_percentage=quote.commission_percentage,
        commission_fixed=quote.commission_fixed,
        total_commission=quote.total_commission,
        total_charged=quote.total_charged,
        platform_commission=quote.platform_commission,
        reseller_commission=quote.reseller_commission,
        state=RemittanceState.REQUEST if is_request else RemittanceState.PENDING,
        created_by=None if is_request else actor,
        reseller=reseller,
        is_request=is_request,
    )

    remittance = _create_with_unique_code(fields, code_factory)

    logger.info(
        "Remise %s créée (%s, %s %s)",
        remittance.tracking_code,
        remittance.state,
        remittance.amount_sent,
        remittance.delivery_type,
    )
    _notify(remittance, None, actor)
    return remittance


# ============================================================
# TRANSITIONS
# ============================================================

@transaction.atomic
def approve(remittance, actor=None):
    remittance = _lock(remittance)
    check_transition(remittance.state, RemittanceState.PENDING, tracking_code=remittance.tracking_code)

    if remittance.approved_at is None:
        remittance.approved_at = timezone.now()

    return _apply_transition(remittance, RemittanceState.PENDING, actor, ["approved_at"])


@transaction.atomic
def assign(remittance, courier, actor=None):
    remittance = _lock(remittance)
    check_transition(remittance.state, RemittanceState.IN_PROGRESS, tracking_code=remittance.tracking_code)

    courier_id = getattr(courier, "pk", courier)
    courier = User.objects.filter(
        pk=courier_id,
        role=UserRole.COURIER,
        is_superuser=False,
        is_active=True,
    ).first()

    if courier is None:
        raise CourierInactive(courier_id)

    remittance.courier = courier
    return _apply_transition(remittance, RemittanceState.IN_PROGRESS, actor, ["courier"])


@transaction.atomic
def unassign(remittance, actor=None):
    """Retour en attente ; les espèces déjà allouées restent au livreur."""

    remittance = _lock(remittance)
    check_transition(remittance.state, RemittanceState.PENDING, tracking_code=remittance.tracking_code)

    remittance.courier = None
    return _apply_transition(remittance, RemittanceState.PENDING, actor, ["courier"])


@transaction.atomic
def deliver(remittance, actor=None, proof="", notes=""):
    """
    Livraison : débit espèces du livreur, commission revendeur,
    recette comptable. Tout ou rien.
    """

    remittance = _lock(remittance)
    check_transition(remittance.state, RemittanceState.DELIVERED, tracking_code=remittance.tracking_code)

    if actor is not None and not actor.is_admin and remittance.courier_id != actor.pk:
        raise PermissionDenied("Seul le livreur assigné peut livrer cette remise.")

    locked = _lock_users(remittance.courier_id, remittance.reseller_id)

    record_delivery(locked[remittance.courier_id], remittance, actor=actor)

    reseller = locked.get(remittance.reseller_id)
    if reseller is not None and reseller.uses_logistics and remittance.reseller_commission:
        accrue(reseller, remittance.reseller_commission, remittance=remittance)

    record_accounting(
        MovementKind.INCOME,
        f"Remise {remittance.tracking_code}",
        remittance.total_charged,
        remittance=remittance,
        actor=actor,
    )

    if remittance.delivered_at is None:
        remittance.delivered_at = timezone.now()
    if proof:
        remittance.delivery_proof = proof
    _append_note(remittance, notes)

    return _apply_transition(
        remittance,
        RemittanceState.DELIVERED,
        actor,
        ["delivered_at", "delivery_proof", "notes"],
    )


@transaction.atomic
def invoice(remittance, actor=None):
    """Idempotent : une remise déjà facturée est renvoyée telle quelle."""

    remittance = _lock(remittance)

    if remittance.invoiced:
        return remittance

    check_transition(remittance.state, RemittanceState.INVOICED, tracking_code=remittance.tracking_code)

    remittance.invoiced = True
    remittance.invoiced_at = timezone.now()
    return _apply_transition(remittance, RemittanceState.INVOICED, actor, ["invoiced", "invoiced_at"])


@transaction.atomic
def cancel(remittance, actor=None, reason=""):
    """Annulation ; aucune écriture de journal n'est inversée."""

    remittance = _lock(remittance)
    check_transition(remittance.state, RemittanceState.CANCELLED, tracking_code=remittance.tracking_code)

    if remittance.cancelled_at is None:
        remittance.cancelled_at = timezone.now()
    _append_note(remittance, reason)

    return _apply_transition(remittance, RemittanceState.CANCELLED, actor, ["cancelled_at", "notes"])
