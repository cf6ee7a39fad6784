"""Reading stored car/listing pricing documents for the management commands."""

import json
from pathlib import Path

from django.core.management.base import CommandError


def load_pricing_document(path: str) -> dict:
    """
    Load ``{"pricing": {...}, "seasonalPricing": [...]}`` from a JSON file

    A bare pricing object (``{"daily": 50, ...}``) is accepted too and
    treated as having no seasonal rules.
    """
    try:
        document = json.loads(Path(path).read_text(encoding='utf-8'))
    except FileNotFoundError:
        raise CommandError(f"File not found: {path}")
    except json.JSONDecodeError as exc:
        raise CommandError(f"{path} is not valid JSON: {exc}")

    if not isinstance(document, dict):
        raise CommandError(f"{path} must contain a JSON object")
    if 'pricing' not in document and 'daily' in document:
        document = {'pricing': document}
    document.setdefault('seasonalPricing', [])
    if not isinstance(document['seasonalPricing'], list):
        raise CommandError("seasonalPricing must be a list")
    return document
