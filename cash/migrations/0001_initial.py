import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


MOVEMENT_KINDS = [
    ("ALLOCATION", "Allocation"),
    ("WITHDRAWAL", "Retrait"),
    ("DELIVERY", "Livraison"),
    ("PICKUP", "Collecte"),
    ("CURRENCY_SALE", "Vente de devises"),
]

CURRENCIES = [
    ("USD", "Dollar US"),
    ("CUP", "Peso cubain"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("remittances", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CashMovement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("kind", models.CharField(choices=MOVEMENT_KINDS, max_length=20)),
                ("currency", models.CharField(choices=CURRENCIES, max_length=3)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("balance_before", models.DecimalField(decimal_places=2, max_digits=14)),
                ("balance_after", models.DecimalField(decimal_places=2, max_digits=14)),
                ("exchange_rate", models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "courier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cash_movements",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "remittance",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cash_movements",
                        to="remittances.remittance",
                    ),
                ),
                (
                    "counterpart",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="counterpart_of",
                        to="cash.cashmovement",
                    ),
                ),
                (
                    "recorded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cash_movements_recorded",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "mouvement espèces",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["courier", "currency", "id"], name="cash_movement_courier_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="cash_movement_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("balance_before__gte", 0), ("balance_after__gte", 0)),
                        name="cash_movement_balances_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(models.Q(("kind", "CURRENCY_SALE"), _negated=True), ("exchange_rate__isnull", False), _connector="OR"),
                        name="cash_movement_sale_has_rate",
                    ),
                ],
            },
        ),
    ]
