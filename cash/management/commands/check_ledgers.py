# cash/management/commands/check_ledgers.py

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from accounts.constants import UserRole
from cash.services import reconcile_courier

User = get_user_model()


class Command(BaseCommand):
    help = "Compare les soldes espèces en cache des livreurs avec leur journal"

    def add_arguments(self, parser):
        parser.add_argument("--courier", type=int, help="Limiter à un livreur (id)")

    def handle(self, *args, **options):
        couriers = User.objects.filter(role=UserRole.COURIER).order_by("pk")
        if options["courier"]:
            couriers = couriers.filter(pk=options["courier"])

        errors = 0

        for courier in couriers:
            for currency, line in reconcile_courier(courier).items():
                if line["consistent"]:
                    continue
                errors += 1
                self.stdout.write(
                    self.style.ERROR(
                        f"{courier.username} {currency} : cache {line['cached']} | "
                        f"journal {line['from_log']} | "
                        f"dernier solde {line['last_balance_after']}"
                    )
                )

        if errors:
            raise CommandError(f"{errors} solde(s) incohérent(s)")

        self.stdout.write(self.style.SUCCESS(f"{couriers.count()} livreur(s) contrôlé(s), journaux cohérents"))
