import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


KINDS = [
    ("NOT_DELIVERED", "Non reçue par le bénéficiaire"),
    ("WRONG_AMOUNT", "Montant incorrect"),
    ("WRONG_RECIPIENT", "Mauvais destinataire"),
    ("MISCONDUCT", "Comportement du livreur"),
    ("OVERCHARGE", "Frais indus"),
    ("OTHER", "Autre"),
]

PRIORITIES = [
    ("LOW", "Basse"),
    ("NORMAL", "Normale"),
    ("HIGH", "Haute"),
    ("URGENT", "Urgente"),
]

STATUSES = [
    ("OPEN", "Ouvert"),
    ("INVESTIGATING", "En investigation"),
    ("AWAITING_CUSTOMER", "En attente du client"),
    ("ESCALATED", "Escaladé"),
    ("RESOLVED", "Résolu"),
    ("REJECTED", "Rejeté"),
]

RESOLUTIONS = [
    ("FULL_REFUND", "Remboursement total"),
    ("PARTIAL_REFUND", "Remboursement partiel"),
    ("RESEND", "Nouvel envoi"),
    ("COMPENSATION", "Compensation"),
    ("NO_ACTION", "Sans suite"),
    ("OTHER", "Autre"),
]

COMMENT_KINDS = [
    ("COMMENT", "Commentaire"),
    ("STATUS_CHANGE", "Changement de statut"),
    ("ASSIGNMENT", "Assignation"),
    ("SYSTEM", "Système"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("remittances", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Dispute",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number", models.CharField(editable=False, max_length=20, unique=True)),
                ("kind", models.CharField(choices=KINDS, max_length=20)),
                ("priority", models.CharField(choices=PRIORITIES, default="NORMAL", max_length=10)),
                ("status", models.CharField(choices=STATUSES, default="OPEN", max_length=20)),
                ("description", models.TextField()),
                ("resolution", models.TextField(blank=True)),
                ("resolution_type", models.CharField(blank=True, choices=RESOLUTIONS, max_length=20)),
                ("refund_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("deadline", models.DateTimeField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("resolved_at", models.DateTimeField(blank=True, null=True)),
                (
                    "remittance",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="disputes",
                        to="remittances.remittance",
                    ),
                ),
                (
                    "reported_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reported_disputes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "assigned_to",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_disputes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "resolved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="resolved_disputes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["status", "priority", "created_at"], name="dispute_status_priority_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("refund_amount__isnull", True), ("refund_amount__gt", 0), _connector="OR"),
                        name="dispute_refund_amount_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DisputeComment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("kind", models.CharField(choices=COMMENT_KINDS, default="COMMENT", max_length=20)),
                ("content", models.TextField()),
                ("internal", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "dispute",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="comments",
                        to="disputes.dispute",
                    ),
                ),
                (
                    "author",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="dispute_comments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "commentaire de litige",
                "ordering": ["created_at", "id"],
            },
        ),
    ]
