# remittances/signals.py
"""
Notification des changements d'état, émise après commit.

Arguments : remittance, previous_state, new_state, actor.
Les récepteurs (push, SMS, WhatsApp...) sont externes ; leurs échecs
sont journalisés et n'interrompent jamais le flux.
"""

import logging

from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

remittance_state_changed = Signal()


@receiver(remittance_state_changed)
def log_state_change(sender, remittance, previous_state, new_state, actor=None, **kwargs):
    logger.info(
        "Remise %s : %s → %s (par %s)",
        remittance.tracking_code,
        previous_state,
        new_state,
        getattr(actor, "username", "public"),
    )
