"""Price labels shown on listing cards and in the admin panel."""

from apps.pricing.domain.resolver import EffectivePrice

CURRENCY_SYMBOLS = {
    'TRY': '₺',
    'USD': '$',
    'EUR': '€',
}

# Turkish period suffixes used by the storefront
PERIOD_LABELS = {
    'daily': 'gün',
    'weekly': 'hafta',
    'monthly': 'ay',
}


def format_price(price: EffectivePrice) -> str:
    """Render e.g. '€80.00/gün'; unknown currencies fall back to the lira sign"""
    symbol = CURRENCY_SYMBOLS.get(price.currency, '₺')
    label = PERIOD_LABELS.get(price.period, 'ay')
    return f"{symbol}{price.amount:.2f}/{label}"
