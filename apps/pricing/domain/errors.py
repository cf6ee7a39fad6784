"""
Pricing Domain Errors

- ParseError / InvalidDateFormat: a date string in neither accepted notation
- InvalidPeriod: a period other than daily, weekly or monthly
- InvalidBasePricing: a car/listing pricing document without a positive daily rate
- InvalidSeasonalRule: a stored seasonal rule that cannot be read
"""

from shared.domain.errors import DomainError


class PricingError(DomainError):
    code = 'pricing_error'
    default_message = 'Price could not be resolved'


class ParseError(PricingError):
    code = 'parse_error'
    default_message = 'Could not parse value'


class InvalidDateFormat(ParseError):
    code = 'invalid_date_format'
    default_message = 'Invalid date format: {value!r}. Use DD/MM/YYYY or YYYY-MM-DD.'


class InvalidPeriod(PricingError):
    code = 'invalid_period'
    default_message = 'Invalid pricing period: {period!r}. Must be daily, weekly or monthly.'


class InvalidBasePricing(PricingError):
    code = 'invalid_base_pricing'
    default_message = 'Daily price is required and must be positive'


class InvalidSeasonalRule(PricingError):
    code = 'invalid_seasonal_rule'
    default_message = 'Seasonal pricing rule #{index} is invalid'
