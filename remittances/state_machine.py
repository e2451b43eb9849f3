# remittances/state_machine.py

from django.db import models

from core.exceptions import InvalidStateTransition


class RemittanceState(models.TextChoices):
    REQUEST = "REQUEST", "Demande publique"
    PENDING = "PENDING", "En attente"
    IN_PROGRESS = "IN_PROGRESS", "En cours de livraison"
    DELIVERED = "DELIVERED", "Livrée"
    INVOICED = "INVOICED", "Facturée"
    CANCELLED = "CANCELLED", "Annulée"


ALLOWED_TRANSITIONS = {
    RemittanceState.REQUEST: [
        RemittanceState.PENDING,
        RemittanceState.CANCELLED,
    ],
    RemittanceState.PENDING: [
        RemittanceState.IN_PROGRESS,
        RemittanceState.CANCELLED,
    ],
    RemittanceState.IN_PROGRESS: [
        RemittanceState.DELIVERED,
        RemittanceState.PENDING,
        RemittanceState.CANCELLED,
    ],
    RemittanceState.DELIVERED: [
        RemittanceState.INVOICED,
    ],
    RemittanceState.INVOICED: [],
    RemittanceState.CANCELLED: [],
}

TERMINAL_STATES = (
    RemittanceState.INVOICED,
    RemittanceState.CANCELLED,
)


def can_transition(current, target):
    return target in ALLOWED_TRANSITIONS.get(current, [])


def check_transition(current, target, **context):
    if not can_transition(current, target):
        raise InvalidStateTransition(current, target, **context)
