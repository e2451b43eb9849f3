# core/exceptions.py
"""
Taxonomie des erreurs métier du moteur de remises.

Every rejection is an APIException carrying a structured payload
``{"kind": ..., "detail": ..., <offending fields>}`` so callers can
render a specific message. ``ValidationError`` is DRF's own.
"""

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler


class LedgerError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "LedgerError"
    default_detail = "Opération refusée."
    default_code = "ledger_error"

    def __init__(self, detail=None, **context):
        message = str(detail or self.default_detail)
        self.context = context
        payload = {"kind": self.kind, "detail": message}
        payload.update({k: _plain(v) for k, v in context.items()})
        super().__init__(detail=payload, code=self.default_code)
        self.message = message

    def __str__(self):
        return self.message


class InvalidStateTransition(LedgerError):
    status_code = status.HTTP_409_CONFLICT
    kind = "InvalidStateTransition"
    default_detail = "Transition d'état interdite."
    default_code = "invalid_state_transition"

    def __init__(self, current, target, **context):
        super().__init__(
            f"Transition interdite : {current} → {target}",
            current_state=current,
            target_state=target,
            **context,
        )


class RateUnavailable(LedgerError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    kind = "RateUnavailable"
    default_detail = "Aucun taux de change disponible."
    default_code = "rate_unavailable"

    def __init__(self, base, quote):
        super().__init__(
            f"Aucun taux disponible pour {base}/{quote}",
            currency_pair=f"{base}/{quote}",
        )


class NoTierForAmount(LedgerError):
    kind = "NoTierForAmount"
    default_detail = "Aucune tranche de commission pour ce montant."
    default_code = "no_tier_for_amount"

    def __init__(self, amount, detail=None, **context):
        super().__init__(
            detail or f"Aucune tranche de commission active pour {amount}",
            amount=amount,
            **context,
        )


class InsufficientBalance(LedgerError):
    status_code = status.HTTP_409_CONFLICT
    kind = "InsufficientBalance"
    default_detail = "Solde insuffisant."
    default_code = "insufficient_balance"

    def __init__(self, account_id, currency, available, requested):
        super().__init__(
            f"Solde insuffisant. Disponible: {available} {currency} | "
            f"Demandé: {requested} {currency}",
            account_id=account_id,
            currency=currency,
            available=available,
            requested=requested,
        )


class CourierInactive(LedgerError):
    kind = "CourierInactive"
    default_detail = "Livreur inactif ou inexistant."
    default_code = "courier_inactive"

    def __init__(self, courier_id):
        super().__init__(
            "Le livreur doit être un livreur actif.",
            courier_id=courier_id,
        )


class DuplicateTrackingCode(Exception):
    """Collision de code de suivi. Retried internally, never surfaced."""


def _plain(value):
    # Decimal et autres types non JSON
    if value is None or isinstance(value, (bool, int, str, list, dict)):
        return value
    return str(value)


def ledger_exception_handler(exc, context):
    """
    DRF exception handler.

    Django's own ValidationError (raised by model guards) is mapped to
    a 400 with the same shape as the DRF one.
    """
    from django.core.exceptions import ValidationError as DjangoValidationError
    from rest_framework.exceptions import ValidationError

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(
            exc.message_dict if hasattr(exc, "error_dict") else exc.messages
        )

    return exception_handler(exc, context)
