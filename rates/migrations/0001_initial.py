import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


RATE_CURRENCIES = [
    ("USD", "Dollar US"),
    ("EUR", "Euro"),
    ("MLC", "Monnaie librement convertible"),
    ("CUP", "Peso cubain"),
]

RATE_SOURCES = [
    ("MANUAL", "Saisie manuelle"),
    ("PRIMARY", "Source externe principale"),
    ("SECONDARY", "Source externe secondaire"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ExchangeRate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("base_currency", models.CharField(choices=RATE_CURRENCIES, max_length=3)),
                ("quote_currency", models.CharField(choices=RATE_CURRENCIES, default="CUP", max_length=3)),
                ("rate", models.DecimalField(decimal_places=4, max_digits=14)),
                ("source", models.CharField(choices=RATE_SOURCES, default="MANUAL", max_length=10)),
                ("active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="rates_updated",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["base_currency", "quote_currency", "-updated_at"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("active", True)),
                        fields=("base_currency", "quote_currency", "source"),
                        name="unique_active_rate_per_pair_source",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("rate__gt", 0)),
                        name="exchange_rate_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ExchangeRateHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("base_currency", models.CharField(max_length=3)),
                ("quote_currency", models.CharField(max_length=3)),
                ("source", models.CharField(choices=RATE_SOURCES, max_length=10)),
                ("previous_rate", models.DecimalField(decimal_places=4, max_digits=14)),
                ("new_rate", models.DecimalField(decimal_places=4, max_digits=14)),
                ("changed_at", models.DateTimeField(auto_now_add=True)),
                (
                    "exchange_rate",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="history",
                        to="rates.exchangerate",
                    ),
                ),
                (
                    "changed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="rate_changes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "historique de taux",
                "ordering": ["-changed_at", "-id"],
            },
        ),
    ]
