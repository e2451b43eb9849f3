from django.core.management.base import BaseCommand

from rates.providers import PROVIDERS
from rates.services.refresh import refresh_rates


class Command(BaseCommand):
    help = "Récupère les cotations externes et met à jour les taux actifs"

    def add_arguments(self, parser):
        parser.add_argument(
            "--source",
            choices=list(PROVIDERS.keys()),
            help="Limiter à une seule source",
        )

    def handle(self, *args, **options):
        sources = [options["source"]] if options["source"] else list(PROVIDERS.keys())
        updated = 0

        for source in sources:
            # Appel réseau hors transaction
            quotes = PROVIDERS[source]()
            if not quotes:
                self.stdout.write(self.style.WARNING(f"{source} : aucune cotation"))
                continue

            rates = refresh_rates(quotes, source=source)
            updated += len(rates)
            for code, rate in rates.items():
                self.stdout.write(f"{source} {code}/CUP = {rate.rate}")

        self.stdout.write(self.style.SUCCESS(f"{updated} taux mis à jour"))
