import json

from django.core.management.base import BaseCommand, CommandError

from apps.pricing.application.queries import QuotePriceHandler, QuotePriceQuery
from apps.pricing.domain.display import format_price
from apps.pricing.domain.seasonal import PERIODS
from apps.pricing.management.documents import load_pricing_document


class Command(BaseCommand):
    help = "Quote the effective price of a car/listing for one date"

    def add_arguments(self, parser):
        parser.add_argument("pricing_file", help="JSON file with pricing and seasonalPricing")
        parser.add_argument(
            "--date", required=True, help="Date to quote, DD/MM/YYYY or YYYY-MM-DD"
        )
        parser.add_argument("--period", choices=PERIODS, default="daily")
        parser.add_argument(
            "--json", action="store_true", dest="as_json", help="Print the price as JSON"
        )

    def handle(self, *args, **options):
        document = load_pricing_document(options["pricing_file"])

        result = QuotePriceHandler().handle(QuotePriceQuery(
            base_pricing=document.get("pricing"),
            seasonal_rules=document["seasonalPricing"],
            query_date=options["date"],
            period=options["period"],
        ))
        if result.is_err:
            raise CommandError(result.error.message)

        price = result.value
        if options["as_json"]:
            self.stdout.write(json.dumps(price.to_dict()))
            return

        line = format_price(price)
        if price.is_seasonal:
            line += f" ({price.seasonal_name})"
        self.stdout.write(self.style.SUCCESS(line))
