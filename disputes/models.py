# disputes/models.py

from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import AppendOnlyModel


class DisputeKind(models.TextChoices):
    NOT_DELIVERED = "NOT_DELIVERED", "Non reçue par le bénéficiaire"
    WRONG_AMOUNT = "WRONG_AMOUNT", "Montant incorrect"
    WRONG_RECIPIENT = "WRONG_RECIPIENT", "Mauvais destinataire"
    MISCONDUCT = "MISCONDUCT", "Comportement du livreur"
    OVERCHARGE = "OVERCHARGE", "Frais indus"
    OTHER = "OTHER", "Autre"


class DisputePriority(models.TextChoices):
    LOW = "LOW", "Basse"
    NORMAL = "NORMAL", "Normale"
    HIGH = "HIGH", "Haute"
    URGENT = "URGENT", "Urgente"


class DisputeStatus(models.TextChoices):
    OPEN = "OPEN", "Ouvert"
    INVESTIGATING = "INVESTIGATING", "En investigation"
    AWAITING_CUSTOMER = "AWAITING_CUSTOMER", "En attente du client"
    ESCALATED = "ESCALATED", "Escaladé"
    RESOLVED = "RESOLVED", "Résolu"
    REJECTED = "REJECTED", "Rejeté"


class ResolutionType(models.TextChoices):
    FULL_REFUND = "FULL_REFUND", "Remboursement total"
    PARTIAL_REFUND = "PARTIAL_REFUND", "Remboursement partiel"
    RESEND = "RESEND", "Nouvel envoi"
    COMPENSATION = "COMPENSATION", "Compensation"
    NO_ACTION = "NO_ACTION", "Sans suite"
    OTHER = "OTHER", "Autre"


# Priorité par défaut et délai de traitement (heures)
KIND_RULES = {
    DisputeKind.NOT_DELIVERED: (DisputePriority.HIGH, 24),
    DisputeKind.WRONG_AMOUNT: (DisputePriority.HIGH, 24),
    DisputeKind.WRONG_RECIPIENT: (DisputePriority.URGENT, 12),
    DisputeKind.MISCONDUCT: (DisputePriority.NORMAL, 72),
    DisputeKind.OVERCHARGE: (DisputePriority.HIGH, 24),
    DisputeKind.OTHER: (DisputePriority.NORMAL, 48),
}

# Résolutions qui donnent lieu à un versement au client
REFUND_RESOLUTIONS = (
    ResolutionType.FULL_REFUND,
    ResolutionType.PARTIAL_REFUND,
    ResolutionType.COMPENSATION,
)

ALLOWED_TRANSITIONS = {
    DisputeStatus.OPEN: [
        DisputeStatus.INVESTIGATING,
        DisputeStatus.AWAITING_CUSTOMER,
        DisputeStatus.ESCALATED,
        DisputeStatus.RESOLVED,
        DisputeStatus.REJECTED,
    ],
    DisputeStatus.INVESTIGATING: [
        DisputeStatus.AWAITING_CUSTOMER,
        DisputeStatus.ESCALATED,
        DisputeStatus.RESOLVED,
        DisputeStatus.REJECTED,
    ],
    DisputeStatus.AWAITING_CUSTOMER: [
        DisputeStatus.INVESTIGATING,
        DisputeStatus.RESOLVED,
        DisputeStatus.REJECTED,
    ],
    DisputeStatus.ESCALATED: [
        DisputeStatus.INVESTIGATING,
        DisputeStatus.RESOLVED,
        DisputeStatus.REJECTED,
    ],
    DisputeStatus.RESOLVED: [],
    DisputeStatus.REJECTED: [],
}

CLOSED_STATUSES = (DisputeStatus.RESOLVED, DisputeStatus.REJECTED)


def sla_deadline(kind, start):
    _, hours = KIND_RULES[kind]
    return start + timedelta(hours=hours)


class Dispute(models.Model):
    """
    Litige ouvert sur une remise livrée ou facturée.

    Le statut n'évolue que par disputes.services ; un litige clos
    (résolu ou rejeté) ne bouge plus.
    """

    number = models.CharField(max_length=20, unique=True, editable=False)
    remittance = models.ForeignKey(
        "remittances.Remittance",
        on_delete=models.PROTECT,
        related_name="disputes",
    )
    kind = models.CharField(max_length=20, choices=DisputeKind.choices)
    priority = models.CharField(max_length=10, choices=DisputePriority.choices, default=DisputePriority.NORMAL)
    status = models.CharField(max_length=20, choices=DisputeStatus.choices, default=DisputeStatus.OPEN)
    description = models.TextField()

    reported_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reported_disputes",
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_disputes",
    )

    # =========================
    # RÉSOLUTION
    # =========================
    resolution = models.TextField(blank=True)
    resolution_type = models.CharField(max_length=20, choices=ResolutionType.choices, blank=True)
    refund_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="resolved_disputes",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    deadline = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status", "priority", "created_at"], name="dispute_status_priority_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(refund_amount__isnull=True) | Q(refund_amount__gt=0),
                name="dispute_refund_amount_positive",
            ),
        ]

    @property
    def is_closed(self):
        return self.status in CLOSED_STATUSES

    def __str__(self):
        return f"{self.number} ({self.status})"


class CommentKind(models.TextChoices):
    COMMENT = "COMMENT", "Commentaire"
    STATUS_CHANGE = "STATUS_CHANGE", "Changement de statut"
    ASSIGNMENT = "ASSIGNMENT", "Assignation"
    SYSTEM = "SYSTEM", "Système"


class DisputeComment(AppendOnlyModel):
    """Fil d'activité du litige. Les notes internes restent côté administration."""

    dispute = models.ForeignKey(Dispute, on_delete=models.PROTECT, related_name="comments")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="dispute_comments",
    )
    kind = models.CharField(max_length=20, choices=CommentKind.choices, default=CommentKind.COMMENT)
    content = models.TextField()
    internal = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "commentaire de litige"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.dispute.number} - {self.kind}"
