"""
Date Parsing

Seasonal pricing documents store their boundaries in two notations, often
mixed within the same payload:

- Turkish day-first: ``15/07/2025`` (DD/MM/YYYY)
- ISO: ``2025-07-15`` or a full timestamp ``2025-07-15T10:00:00Z``

DateParser normalizes both into a plain ``datetime.date``. Seasonal
boundaries are calendar days, not instants, so the result is timezone-naive
and a timestamp contributes only the date written in it.
"""

import re
from datetime import date, datetime

from django.utils.dateparse import parse_date, parse_datetime

from apps.pricing.domain.errors import InvalidDateFormat
from shared.domain.result import Err, Ok, Result

DAY_FIRST_RE = re.compile(r'^(?P<day>\d{1,2})/(?P<month>\d{1,2})/(?P<year>\d{4})$')
ISO_RE = re.compile(
    r'^\d{4}-\d{2}-\d{2}'
    r'(?:[T ]\d{2}:\d{2}(?::\d{2}(?:[.,]\d{1,9})?)?\s*(?:Z|[+-]\d{2}(?::?\d{2})?)?)?$'
)


class DateParser:
    """
    Parse a date string in DD/MM/YYYY or ISO notation into a calendar date

    Usage:
        parser = DateParser()
        parser.parse('15/07/2025')           # Ok(date(2025, 7, 15))
        parser.parse('2025-07-15')           # Ok(date(2025, 7, 15))
        parser.parse('2025-13-01')           # Err(InvalidDateFormat)
    """

    def parse(self, value) -> Result[date, InvalidDateFormat]:
        # Already-parsed values pass through (documents loaded by the ORM)
        if isinstance(value, datetime):
            return Ok(value.date())
        if isinstance(value, date):
            return Ok(value)
        if not isinstance(value, str):
            return Err(InvalidDateFormat(value=value))

        text = value.strip()
        if '/' in text:
            parsed = self._parse_day_first(text)
        elif '-' in text:
            parsed = self._parse_iso(text)
        else:
            parsed = None

        if parsed is None:
            return Err(InvalidDateFormat(value=value))
        return Ok(parsed)

    def _parse_day_first(self, text: str) -> date | None:
        match = DAY_FIRST_RE.match(text)
        if not match:
            return None
        try:
            return date(int(match['year']), int(match['month']), int(match['day']))
        except ValueError:
            # Day 32, month 13 and the like
            return None

    def _parse_iso(self, text: str) -> date | None:
        # parse_date/parse_datetime also take week dates and basic format
        if not ISO_RE.match(text):
            return None
        try:
            if 'T' in text or ' ' in text:
                moment = parse_datetime(text)
                return moment.date() if moment else None
            return parse_date(text)
        except ValueError:
            # Well formatted but not a real calendar date
            return None


date_parser = DateParser()


def parse_calendar_date(value) -> Result[date, InvalidDateFormat]:
    """Module-level shortcut for DateParser().parse()"""
    return date_parser.parse(value)
