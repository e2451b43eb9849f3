from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CommissionTier",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("range_min", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "range_max",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Borne haute exclue ; vide = sans limite",
                        max_digits=12,
                        null=True,
                    ),
                ),
                ("percentage", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("fixed_fee", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["range_min"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("range_max__isnull", True), ("range_max__gt", models.F("range_min")), _connector="OR"),
                        name="commission_tier_range_ordered",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("percentage__gte", 0), ("fixed_fee__gte", 0), ("range_min__gte", 0)),
                        name="commission_tier_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BusinessSetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=64, unique=True)),
                ("value", models.CharField(max_length=255)),
                ("description", models.CharField(blank=True, max_length=255)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["key"],
            },
        ),
    ]
