"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
- DateRange: Represents an inclusive range of calendar dates (season boundaries)
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from shared.domain.base import ValueObject

SUPPORTED_CURRENCIES = ('EUR', 'TRY', 'USD')
CENT = Decimal('0.01')


def to_decimal(value) -> Decimal:
    """
    Convert a stored number (int, float, str or Decimal) to Decimal

    Floats go through str() so 0.1 stays 0.1.
    Raises ValueError for anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, TypeError):
            raise ValueError(f"Not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def round_half_up(amount: Decimal) -> Decimal:
    """
    Round to 2 decimal places with standard half-up rounding

    Raises ValueError when the amount has too many digits to hold in cents.
    """
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount out of range: {amount}")


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Immutable and supports arithmetic operations.
    The amount is always held rounded to cents (half-up).
    """
    amount: Decimal
    currency: str = 'EUR'

    def __post_init__(self):
        object.__setattr__(self, 'amount', round_half_up(to_decimal(self.amount)))

        # Validation
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        """Multiply money by a factor"""
        if isinstance(factor, bool) or not isinstance(factor, (int, float, Decimal)):
            raise TypeError("Can only multiply Money by number")
        return Money(self.amount * Decimal(str(factor)), self.currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @classmethod
    def zero(cls, currency: str = 'EUR') -> 'Money':
        return cls(Decimal('0'), currency)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date to end_date, both inclusive.
    Used for seasonal pricing periods, which are calendar-day spans.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        # Validation
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Two ranges overlap if they share any calendar day.
        Both ends are inclusive, so ranges touching on one day overlap.

        Examples:
            - DateRange(1 Jul, 31 Jul) overlaps with DateRange(31 Jul, 31 Aug) -> True
            - DateRange(1 Jul, 30 Jul) overlaps with DateRange(31 Jul, 31 Aug) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return (self.start_date <= other.end_date and
                self.end_date >= other.start_date)

    def contains(self, check_date: date) -> bool:
        """Check if a date is within this range (inclusive both ends)"""
        return self.start_date <= check_date <= self.end_date

    def __len__(self) -> int:
        """Number of calendar days covered, counting both ends"""
        return (self.end_date - self.start_date).days + 1

    def __str__(self):
        return f"{self.start_date.strftime('%d/%m/%Y')} - {self.end_date.strftime('%d/%m/%Y')}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
