from django.core.management.base import BaseCommand, CommandError

from apps.pricing.domain.seasonal import audit_seasonal_rules
from apps.pricing.management.documents import load_pricing_document


class Command(BaseCommand):
    help = "Check the seasonal pricing rules of a car/listing document"

    def add_arguments(self, parser):
        parser.add_argument("pricing_file", help="JSON file with pricing and seasonalPricing")
        parser.add_argument(
            "--strict", action="store_true", help="Treat overlapping rules as errors"
        )

    def handle(self, *args, **options):
        document = load_pricing_document(options["pricing_file"])
        rules = document["seasonalPricing"]
        issues = audit_seasonal_rules(rules)

        self.stdout.write(f"Seasonal rules: {len(rules)}")
        if not issues:
            self.stdout.write(self.style.SUCCESS("No problems found"))
            return

        for issue in issues:
            rule_numbers = ", ".join(f"#{index}" for index in issue.indexes)
            line = f"  [{issue.code}] {rule_numbers}: {issue.message}"
            if issue.severity == "error":
                self.stdout.write(self.style.ERROR(line))
            else:
                self.stdout.write(self.style.WARNING(line))

        failing = [
            issue for issue in issues
            if issue.severity == "error" or options["strict"]
        ]
        if failing:
            raise CommandError(f"{len(failing)} problem(s) in seasonal pricing rules")
