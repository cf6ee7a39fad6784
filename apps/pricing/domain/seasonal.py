"""
Seasonal Pricing Rules

A car or listing may carry an ordered list of seasonal overrides:

    "seasonalPricing": [
        {"name": "Summer", "startDate": "01/07/2025", "endDate": "31/08/2025", "daily": 80},
        {"name": "New Year", "startDate": "2025-12-20", "endDate": "2026-01-05", "weekly": 900}
    ]

The rules are written by the admin panel and are read-only here. A rule
covers a date when ``startDate <= date <= endDate``. Nothing prevents two
rules from overlapping; when they do, the first rule in stored order wins.
audit_seasonal_rules() reports overlaps for the admin write path.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Mapping, Sequence, Tuple
import logging

from apps.pricing.domain.dates import DateParser, date_parser
from apps.pricing.domain.errors import InvalidDateFormat, InvalidSeasonalRule, PricingError
from shared.domain.base import ValueObject
from shared.domain.result import Err, Ok, Result
from shared.domain.value_objects import DateRange, SUPPORTED_CURRENCIES, round_half_up, to_decimal

logger = logging.getLogger(__name__)

PERIODS = ('daily', 'weekly', 'monthly')


def _optional_price(document: Mapping, key: str) -> Decimal | None:
    """Read an optional price; absent, empty or zero means 'not defined'"""
    raw = document.get(key)
    if raw in (None, ''):
        return None
    amount = to_decimal(raw)
    if amount < 0:
        raise ValueError(f"{key} price cannot be negative")
    round_half_up(amount)
    return amount or None


@dataclass(frozen=True)
class SeasonalRule(ValueObject):
    """
    Time-bounded price override

    Any of daily/weekly/monthly may be missing; a missing period falls back
    to the base pricing. currency is None when the rule does not set one,
    in which case the base currency applies.
    """
    name: str
    start_date: date
    end_date: date
    daily: Decimal | None = None
    weekly: Decimal | None = None
    monthly: Decimal | None = None
    currency: str | None = None

    def covers(self, check_date: date) -> bool:
        """Inclusive on both ends"""
        return self.start_date <= check_date <= self.end_date

    def price_for(self, period: str) -> Decimal | None:
        """Price this rule defines for the period, None when unset or zero"""
        value = getattr(self, period)
        return value if value else None

    @property
    def has_price(self) -> bool:
        return any(self.price_for(period) for period in PERIODS)

    @property
    def date_range(self) -> DateRange:
        """Raises ValueError when start_date is not before end_date"""
        return DateRange(self.start_date, self.end_date)

    @classmethod
    def from_document(
        cls,
        document: Mapping,
        index: int = 0,
        parser: DateParser = date_parser,
    ) -> Result['SeasonalRule', PricingError]:
        """
        Build a rule from one stored seasonalPricing entry

        Returns:
            Ok(SeasonalRule), or Err(InvalidDateFormat) for an unreadable
            boundary, or Err(InvalidSeasonalRule) for a malformed entry.
        """
        if not isinstance(document, Mapping):
            return Err(InvalidSeasonalRule(index=index))

        boundaries = []
        for key in ('startDate', 'endDate'):
            parsed = parser.parse(document.get(key))
            if parsed.is_err:
                return Err(InvalidDateFormat(
                    f"Invalid {key} in seasonal pricing rule #{index}: {document.get(key)!r}",
                    value=document.get(key),
                    index=index,
                ))
            boundaries.append(parsed.value)

        try:
            prices = {period: _optional_price(document, period) for period in PERIODS}
        except ValueError as exc:
            return Err(InvalidSeasonalRule(
                f"Seasonal pricing rule #{index} has an invalid price: {exc}",
                index=index,
            ))

        currency = document.get('currency') or None
        if currency is not None and currency not in SUPPORTED_CURRENCIES:
            return Err(InvalidSeasonalRule(
                f"Seasonal pricing rule #{index} has unsupported currency {currency!r}",
                index=index,
            ))

        return Ok(cls(
            name=str(document.get('name') or f"Season {index + 1}"),
            start_date=boundaries[0],
            end_date=boundaries[1],
            currency=currency,
            **prices,
        ))


@dataclass(frozen=True)
class SeasonalRuleSet(ValueObject):
    """
    Ordered collection of seasonal rules attached to one car or listing

    Order is the stored order and is significant: cover() returns the first
    rule whose range includes the date.
    """
    rules: Tuple[SeasonalRule, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'rules', tuple(self.rules))

    def cover(self, check_date: date) -> SeasonalRule | None:
        """
        Find the seasonal rule covering a date

        Returns None when no rule covers it (callers fall back to base
        pricing). With overlapping rules the first match in stored order is
        returned and the shadowed rules are logged.
        """
        matches = [rule for rule in self.rules if rule.covers(check_date)]
        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(
                f"Overlapping seasonal rules cover {check_date.isoformat()}: "
                f"{', '.join(rule.name for rule in matches)}; using '{matches[0].name}'"
            )
        return matches[0]

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    @classmethod
    def empty(cls) -> 'SeasonalRuleSet':
        return cls(())

    @classmethod
    def from_documents(
        cls,
        documents: Iterable[Mapping] | None,
        parser: DateParser = date_parser,
    ) -> Result['SeasonalRuleSet', PricingError]:
        """Build the rule set from a stored seasonalPricing array, failing on the first bad entry"""
        rules: List[SeasonalRule] = []
        for index, document in enumerate(documents or ()):
            result = SeasonalRule.from_document(document, index=index, parser=parser)
            if result.is_err:
                return result
            rules.append(result.value)
        return Ok(cls(tuple(rules)))


# ===== Admin-side audit =====

@dataclass(frozen=True)
class SeasonalRuleIssue(ValueObject):
    """One problem found by audit_seasonal_rules()"""
    severity: str  # 'error' or 'warning'
    code: str
    message: str
    indexes: Tuple[int, ...] = ()


def audit_seasonal_rules(
    documents: Sequence[Mapping] | None,
    parser: DateParser = date_parser,
) -> List[SeasonalRuleIssue]:
    """
    Check stored seasonal rules the way the admin write path should

    Errors (the write should be rejected):
    - a boundary in neither accepted date notation
    - startDate not before endDate
    - no daily, weekly or monthly price

    Warnings (accepted, but worth surfacing):
    - two rules covering a common day; the earlier one shadows the later
    """
    issues: List[SeasonalRuleIssue] = []
    readable: List[Tuple[int, SeasonalRule]] = []

    for index, document in enumerate(documents or ()):
        result = SeasonalRule.from_document(document, index=index, parser=parser)
        if result.is_err:
            issues.append(SeasonalRuleIssue('error', result.error.code, result.error.message, (index,)))
            continue

        rule = result.value
        if rule.start_date >= rule.end_date:
            issues.append(SeasonalRuleIssue(
                'error',
                'invalid_date_range',
                f"'{rule.name}': end date must be after start date",
                (index,),
            ))
            continue
        if not rule.has_price:
            issues.append(SeasonalRuleIssue(
                'error',
                'missing_price',
                f"'{rule.name}': seasonal pricing must have at least one price",
                (index,),
            ))
        readable.append((index, rule))

    for position, (first_index, first) in enumerate(readable):
        for second_index, second in readable[position + 1:]:
            if first.date_range.overlaps_with(second.date_range):
                issues.append(SeasonalRuleIssue(
                    'warning',
                    'overlapping_rules',
                    f"'{first.name}' and '{second.name}' overlap; "
                    f"'{first.name}' wins on shared dates",
                    (first_index, second_index),
                ))

    return issues
