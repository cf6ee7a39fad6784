"""
Pricing Queries

Use cases that quote prices for a car or listing. They accept either the
stored JSON documents (``pricing`` and ``seasonalPricing``) or already
built value objects, and read the multiplier policy from Django settings.

Queries:
- QuotePriceQuery: effective price for one date and period
- QuoteRentalQuery: total for a pickup-to-dropoff duration
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Sequence
import logging

from django.conf import settings

from apps.pricing.domain.dates import date_parser
from apps.pricing.domain.errors import PricingError
from apps.pricing.domain.resolver import (
    BasePricing,
    EffectivePrice,
    PeriodMultipliers,
    PricingResolver,
    RentalQuote,
    quote_rental,
)
from apps.pricing.domain.seasonal import SeasonalRuleSet
from shared.domain.result import Ok, Result

logger = logging.getLogger(__name__)


def configured_multipliers() -> PeriodMultipliers:
    return PeriodMultipliers.from_mapping(getattr(settings, 'PRICING_PERIOD_MULTIPLIERS', None))


def default_currency() -> str:
    return getattr(settings, 'PRICING_DEFAULT_CURRENCY', 'EUR')


def load_base_pricing(base_pricing) -> Result[BasePricing, PricingError]:
    if isinstance(base_pricing, BasePricing):
        return Ok(base_pricing)
    return BasePricing.from_document(base_pricing, default_currency=default_currency())


def load_seasonal_rules(seasonal_rules) -> Result[SeasonalRuleSet, PricingError]:
    if isinstance(seasonal_rules, SeasonalRuleSet):
        return Ok(seasonal_rules)
    return SeasonalRuleSet.from_documents(seasonal_rules)


# ===== Queries =====

@dataclass
class QuotePriceQuery:
    """Effective price of a car/listing for one calendar date"""
    base_pricing: BasePricing | Mapping[str, Any]
    seasonal_rules: SeasonalRuleSet | Sequence[Mapping[str, Any]] | None
    query_date: date | str
    period: str = 'daily'


@dataclass
class QuoteRentalQuery:
    """Price of a whole rental"""
    base_pricing: BasePricing | Mapping[str, Any]
    seasonal_rules: SeasonalRuleSet | Sequence[Mapping[str, Any]] | None
    pickup_time: datetime
    dropoff_time: datetime


class QuotePriceHandler:
    """Handler for QuotePriceQuery; fails fast with a single PricingError"""

    def __init__(self, multipliers: PeriodMultipliers | None = None):
        self.multipliers = multipliers

    def handle(self, query: QuotePriceQuery) -> Result[EffectivePrice, PricingError]:
        base = load_base_pricing(query.base_pricing)
        if base.is_err:
            logger.warning(f"Cannot quote price: {base.error.message}")
            return base

        rules = load_seasonal_rules(query.seasonal_rules)
        if rules.is_err:
            logger.warning(f"Cannot quote price: {rules.error.message}")
            return rules

        parsed_date = date_parser.parse(query.query_date)
        if parsed_date.is_err:
            return parsed_date

        resolver = PricingResolver(self.multipliers or configured_multipliers())
        result = resolver.resolve(base.value, rules.value, parsed_date.value, query.period)
        if result.is_ok:
            logger.debug(
                f"Quoted {query.period} price for {parsed_date.value.isoformat()}: "
                f"{result.value.amount} {result.value.currency}"
                + (f" (season '{result.value.seasonal_name}')" if result.value.seasonal_name else "")
            )
        return result


class QuoteRentalHandler:
    """Handler for QuoteRentalQuery"""

    def __init__(self, multipliers: PeriodMultipliers | None = None):
        self.multipliers = multipliers

    def handle(self, query: QuoteRentalQuery) -> Result[RentalQuote, PricingError]:
        base = load_base_pricing(query.base_pricing)
        if base.is_err:
            return base
        rules = load_seasonal_rules(query.seasonal_rules)
        if rules.is_err:
            return rules

        resolver = PricingResolver(self.multipliers or configured_multipliers())
        result = quote_rental(base.value, rules.value, query.pickup_time, query.dropoff_time, resolver)
        if result.is_ok:
            logger.debug(f"Quoted rental of {result.value.days} day(s): {result.value.total}")
        return result


def quote_price(base_pricing, seasonal_rules, query_date, period: str = 'daily') -> Result[EffectivePrice, PricingError]:
    """
    Quote the effective price of a car/listing

    External call contract: quotePrice(basePricing, seasonalRules, date, period).
    Pure apart from reading settings; calling it twice with the same inputs
    gives the same EffectivePrice.
    """
    return QuotePriceHandler().handle(QuotePriceQuery(base_pricing, seasonal_rules, query_date, period))
