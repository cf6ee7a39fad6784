"""
Pricing Resolution

Determines what a car or listing costs:

- BasePricing: the stored {daily, weekly, monthly, currency} document
- PricingResolver.resolve(): effective price for one calendar date and period,
  a matching seasonal override winning over the base rate
- quote_rental(): total for a pickup-to-dropoff duration, split into
  months, weeks and remaining days

Weekly and monthly base rates that are missing or zero are derived from the
daily rate with a single multiplier pair (weekly x7, monthly x30), applied
uniformly everywhere a derived rate is needed.

Everything here is pure: identical inputs always give identical outputs.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Mapping
import math

from apps.pricing.domain.errors import InvalidBasePricing, InvalidPeriod, PricingError
from apps.pricing.domain.seasonal import PERIODS, SeasonalRuleSet
from shared.domain.base import ValueObject
from shared.domain.result import Err, Ok, Result
from shared.domain.value_objects import Money, SUPPORTED_CURRENCIES, round_half_up, to_decimal

DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class PeriodMultipliers(ValueObject):
    """How many daily rates a derived weekly/monthly rate is worth"""
    weekly: Decimal = Decimal('7')
    monthly: Decimal = Decimal('30')

    def __post_init__(self):
        for name in ('weekly', 'monthly'):
            value = to_decimal(getattr(self, name))
            if value <= 0:
                raise ValueError(f"{name} multiplier must be positive")
            object.__setattr__(self, name, value)

    def for_period(self, period: str) -> Decimal:
        if period == 'daily':
            return Decimal('1')
        return getattr(self, period)

    @classmethod
    def from_mapping(cls, mapping: Mapping | None) -> 'PeriodMultipliers':
        mapping = mapping or {}
        return cls(
            weekly=mapping.get('weekly', cls.weekly),
            monthly=mapping.get('monthly', cls.monthly),
        )


DEFAULT_MULTIPLIERS = PeriodMultipliers()


@dataclass(frozen=True)
class BasePricing(ValueObject):
    """
    Base rates of a car or listing

    daily must be positive. weekly/monthly of None (or zero in the stored
    document) mean "derive from daily".
    """
    daily: Decimal
    weekly: Decimal | None = None
    monthly: Decimal | None = None
    currency: str = 'EUR'

    def __post_init__(self):
        object.__setattr__(self, 'daily', to_decimal(self.daily))
        if self.daily <= 0:
            raise ValueError("Daily price is required and must be positive")
        round_half_up(self.daily)
        for name in ('weekly', 'monthly'):
            value = getattr(self, name)
            if value is not None:
                value = to_decimal(value)
                if value < 0:
                    raise ValueError(f"{name} price cannot be negative")
                round_half_up(value)
                object.__setattr__(self, name, value or None)
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def price_for(self, period: str, multipliers: PeriodMultipliers = DEFAULT_MULTIPLIERS) -> Decimal:
        """Stored rate for the period, or daily x multiplier when unset"""
        if period == 'daily':
            return self.daily
        stored = getattr(self, period)
        if stored:
            return stored
        return self.daily * multipliers.for_period(period)

    @classmethod
    def from_document(
        cls,
        document: Mapping | None,
        default_currency: str = 'EUR',
    ) -> Result['BasePricing', InvalidBasePricing]:
        """Read the stored ``pricing`` JSON document of a car or listing"""
        if not isinstance(document, Mapping):
            return Err(InvalidBasePricing())
        try:
            return Ok(cls(
                daily=document.get('daily') or 0,
                weekly=document.get('weekly') or None,
                monthly=document.get('monthly') or None,
                currency=document.get('currency') or default_currency,
            ))
        except ValueError as exc:
            return Err(InvalidBasePricing(str(exc)))


@dataclass(frozen=True)
class EffectivePrice(ValueObject):
    """
    Price selected for one calendar date and period

    seasonal_name is set when a seasonal rule supplied the price.
    """
    amount: Decimal
    currency: str
    period: str = 'daily'
    seasonal_name: str | None = None

    @property
    def money(self) -> Money:
        return Money(self.amount, self.currency)

    @property
    def is_seasonal(self) -> bool:
        return self.seasonal_name is not None

    def to_dict(self) -> dict:
        payload = {
            'amount': str(self.amount),
            'currency': self.currency,
            'period': self.period,
        }
        if self.seasonal_name:
            payload['seasonalName'] = self.seasonal_name
        return payload


class PricingResolver:
    """
    Resolve the effective price for a date

    Algorithm:
    1. Ask the rule set which seasonal rule covers the date
    2. If that rule defines a non-zero price for the period, use it
       (currency from the rule, else from the base pricing)
    3. Otherwise use the base rate, deriving weekly/monthly from daily
       when they are not stored
    4. Round half-up to 2 decimal places
    """

    def __init__(self, multipliers: PeriodMultipliers = DEFAULT_MULTIPLIERS):
        self.multipliers = multipliers

    def resolve(
        self,
        base_pricing: BasePricing,
        seasonal_rules: SeasonalRuleSet,
        query_date: date,
        period: str = 'daily',
    ) -> Result[EffectivePrice, PricingError]:
        if period not in PERIODS:
            return Err(InvalidPeriod(period=period))

        rule = seasonal_rules.cover(query_date)
        if rule is not None:
            seasonal_price = rule.price_for(period)
            if seasonal_price:
                return Ok(EffectivePrice(
                    amount=round_half_up(seasonal_price),
                    currency=rule.currency or base_pricing.currency,
                    period=period,
                    seasonal_name=rule.name,
                ))

        try:
            amount = round_half_up(base_pricing.price_for(period, self.multipliers))
        except ValueError as exc:
            # a derived weekly/monthly rate too large to hold in cents
            return Err(InvalidBasePricing(str(exc)))
        return Ok(EffectivePrice(
            amount=amount,
            currency=base_pricing.currency,
            period=period,
        ))


# ===== Rental quotes =====

@dataclass(frozen=True)
class RentalQuote(ValueObject):
    """
    Price of a whole rental

    The duration is split into whole months (30 days), whole weeks
    (7 days) and remaining days; each part is charged at its period rate.
    """
    days: int
    months: int
    weeks: int
    remaining_days: int
    total: Money
    rates: Mapping[str, EffectivePrice] = field(default_factory=dict)

    @property
    def seasonal_name(self) -> str | None:
        """Name of the seasonal rule behind any of the charged rates"""
        for period in PERIODS:
            rate = self.rates.get(period)
            if rate is not None and rate.seasonal_name:
                return rate.seasonal_name
        return None


def rental_days(pickup_time: datetime, dropoff_time: datetime) -> int:
    """Started 24-hour blocks between pickup and dropoff, at least 1"""
    seconds = (dropoff_time - pickup_time) / timedelta(seconds=1)
    return max(1, math.ceil(seconds / 86400))


def quote_rental(
    base_pricing: BasePricing,
    seasonal_rules: SeasonalRuleSet,
    pickup_time: datetime,
    dropoff_time: datetime,
    resolver: PricingResolver | None = None,
) -> Result[RentalQuote, PricingError]:
    """
    Quote a rental from pickup to dropoff

    Rates are resolved for the pickup calendar date, so a rental starting in
    a season is charged the seasonal rate for its whole duration.
    """
    resolver = resolver or PricingResolver()
    days = rental_days(pickup_time, dropoff_time)
    months, rest = divmod(days, DAYS_PER_MONTH)
    weeks, remaining_days = divmod(rest, DAYS_PER_WEEK)
    units = {'monthly': months, 'weekly': weeks, 'daily': remaining_days}

    pickup_date = pickup_time.date()
    rates = {}
    total = Decimal('0')
    currency = base_pricing.currency
    for period, count in units.items():
        if not count:
            continue
        result = resolver.resolve(base_pricing, seasonal_rules, pickup_date, period)
        if result.is_err:
            return result
        rate = result.value
        if rates and rate.currency != currency:
            return Err(PricingError(
                f"Rates for one rental use different currencies: {currency} and {rate.currency}"
            ))
        currency = rate.currency
        rates[period] = rate
        total += rate.amount * count

    try:
        total_money = Money(total, currency)
    except ValueError as exc:
        return Err(PricingError(f"Rental total could not be computed: {exc}"))
    return Ok(RentalQuote(
        days=days,
        months=months,
        weeks=weeks,
        remaining_days=remaining_days,
        total=total_money,
        rates=rates,
    ))
