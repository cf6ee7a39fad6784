"""Tests for the quote_price and check_seasonal_rules management commands."""

from __future__ import annotations

import json
import tempfile
from io import StringIO
from pathlib import Path

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase


class PricingCommandTests(SimpleTestCase):
    """Covers quoting a stored pricing document and auditing its seasonal rules."""

    def setUp(self) -> None:
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        self.tmp_path = Path(tmp_dir.name)
        self.document = {
            "pricing": {"daily": 50, "currency": "EUR"},
            "seasonalPricing": [
                {"name": "Summer", "startDate": "01/07/2025", "endDate": "31/08/2025", "daily": 80},
            ],
        }

    def _write(self, document) -> str:
        path = self.tmp_path / "pricing.json"
        path.write_text(json.dumps(document), encoding="utf-8")
        return str(path)

    def _call(self, *args, **options) -> str:
        out = StringIO()
        call_command(*args, stdout=out, **options)
        return out.getvalue()

    def test_quote_price_in_season(self) -> None:
        output = self._call("quote_price", self._write(self.document), date="15/07/2025")

        self.assertIn("€80.00/gün (Summer)", output)

    def test_quote_price_off_season_weekly(self) -> None:
        output = self._call("quote_price", self._write(self.document), date="2025-01-01", period="weekly")

        self.assertIn("€350.00/hafta", output)
        self.assertNotIn("Summer", output)

    def test_quote_price_as_json(self) -> None:
        output = self._call("quote_price", self._write(self.document), date="2025-07-15", as_json=True)

        self.assertEqual(
            json.loads(output),
            {"amount": "80.00", "currency": "EUR", "period": "daily", "seasonalName": "Summer"},
        )

    def test_bare_pricing_object_is_accepted(self) -> None:
        output = self._call("quote_price", self._write({"daily": 1500, "currency": "TRY"}), date="01/01/2025")

        self.assertIn("₺1500.00/gün", output)

    def test_quote_price_reports_unreadable_date(self) -> None:
        with self.assertRaisesMessage(CommandError, "Invalid date format"):
            self._call("quote_price", self._write(self.document), date="July 15")

    def test_quote_price_reports_missing_file(self) -> None:
        with self.assertRaisesMessage(CommandError, "File not found"):
            self._call("quote_price", str(self.tmp_path / "missing.json"), date="01/01/2025")

    def test_check_seasonal_rules_clean(self) -> None:
        output = self._call("check_seasonal_rules", self._write(self.document))

        self.assertIn("Seasonal rules: 1", output)
        self.assertIn("No problems found", output)

    def test_check_seasonal_rules_overlap_is_only_a_warning(self) -> None:
        self.document["seasonalPricing"].append(
            {"name": "August promo", "startDate": "2025-08-01", "endDate": "2025-08-15", "daily": 70}
        )
        path = self._write(self.document)

        output = self._call("check_seasonal_rules", path)
        self.assertIn("[overlapping_rules] #0, #1", output)

        with self.assertRaisesMessage(CommandError, "1 problem(s)"):
            self._call("check_seasonal_rules", path, strict=True)

    def test_check_seasonal_rules_fails_on_errors(self) -> None:
        self.document["seasonalPricing"].append(
            {"name": "Backwards", "startDate": "31/12/2025", "endDate": "01/12/2025", "daily": 90}
        )

        with self.assertRaisesMessage(CommandError, "1 problem(s)"):
            self._call("check_seasonal_rules", self._write(self.document))
