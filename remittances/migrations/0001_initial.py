import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


STATES = [
    ("REQUEST", "Demande publique"),
    ("PENDING", "En attente"),
    ("IN_PROGRESS", "En cours de livraison"),
    ("DELIVERED", "Livrée"),
    ("INVOICED", "Facturée"),
    ("CANCELLED", "Annulée"),
]

DELIVERY_TYPES = [
    ("LOCAL", "Livraison en monnaie nationale (CUP)"),
    ("HARD", "Livraison en devise (USD)"),
]

CURRENCIES = [
    ("USD", "Dollar US"),
    ("CUP", "Peso cubain"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Remittance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tracking_code", models.CharField(editable=False, max_length=10, unique=True)),
                ("sender_name", models.CharField(max_length=150)),
                ("sender_phone", models.CharField(max_length=50)),
                ("beneficiary_name", models.CharField(max_length=150)),
                ("beneficiary_phone", models.CharField(max_length=50)),
                ("beneficiary_address", models.TextField()),
                ("province", models.CharField(blank=True, max_length=100)),
                ("municipality", models.CharField(blank=True, max_length=100)),
                ("amount_sent", models.DecimalField(decimal_places=2, max_digits=12)),
                ("exchange_rate_applied", models.DecimalField(decimal_places=4, max_digits=14)),
                ("delivery_type", models.CharField(choices=DELIVERY_TYPES, default="LOCAL", max_length=10)),
                ("delivery_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("delivery_currency", models.CharField(choices=CURRENCIES, max_length=3)),
                ("commission_percentage", models.DecimalField(decimal_places=2, max_digits=5)),
                ("commission_fixed", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_commission", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_charged", models.DecimalField(decimal_places=2, max_digits=12)),
                ("platform_commission", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("reseller_commission", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("state", models.CharField(choices=STATES, default="PENDING", max_length=20)),
                ("is_request", models.BooleanField(default=False)),
                ("invoiced", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                ("invoiced_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("delivery_proof", models.CharField(blank=True, max_length=255)),
                ("notes", models.TextField(blank=True)),
                (
                    "courier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assigned_remittances",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_remittances",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "reseller",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reseller_remittances",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["state", "created_at"], name="remittance_state_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount_sent__gt", 0)),
                        name="remittance_amount_sent_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("delivery_amount__gt", 0)),
                        name="remittance_delivery_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("total_charged__gt", 0)),
                        name="remittance_total_charged_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("exchange_rate_applied__gt", 0)),
                        name="remittance_exchange_rate_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("invoiced", True), ("state", "INVOICED")),
                            models.Q(("invoiced", False), models.Q(("state", "INVOICED"), _negated=True)),
                            _connector="OR",
                        ),
                        name="remittance_invoiced_matches_state",
                    ),
                ],
            },
        ),
    ]
