"""
Booking References

Human-readable codes printed on vouchers: ``BK`` + 6 digits for car rentals,
``TR`` + 6 digits for transfers (``BK004217``, ``TR000031``).

generate_reference() is a pure function of the service type and a number.
Where the number comes from is up to the caller: the persistence layer
should hand out a real sequence; TimestampSequence and CounterSequence are
the fallbacks for in-process use and tests.
"""

from datetime import datetime
from typing import Callable, Mapping
import itertools
import re
import threading

from apps.bookings.domain.entities import ServiceType

REFERENCE_PREFIXES = {
    ServiceType.CAR_RENTAL: 'BK',
    ServiceType.TRANSFER: 'TR',
}
REFERENCE_DIGITS = 6
REFERENCE_RE = re.compile(r'^(?P<prefix>[A-Z]{2})(?P<number>\d{%d})$' % REFERENCE_DIGITS)

SequenceSource = Callable[[ServiceType], int]


def generate_reference(
    service_type: ServiceType,
    sequence: int,
    prefixes: Mapping[ServiceType, str] = REFERENCE_PREFIXES,
) -> str:
    """
    Build a booking reference

    Only the last 6 digits of the sequence are used, zero padded.
    """
    if sequence < 0:
        raise ValueError("Reference sequence cannot be negative")
    number = sequence % (10 ** REFERENCE_DIGITS)
    return f"{prefixes[service_type]}{number:0{REFERENCE_DIGITS}d}"


def is_valid_reference(
    reference: str,
    service_type: ServiceType | None = None,
    prefixes: Mapping[ServiceType, str] = REFERENCE_PREFIXES,
) -> bool:
    """Check the shape of a reference, and its prefix when a service type is given"""
    match = REFERENCE_RE.match(reference or '')
    if not match:
        return False
    if service_type is None:
        return match['prefix'] in prefixes.values()
    return match['prefix'] == prefixes[service_type]


class CounterSequence:
    """Monotonic in-process counter, one per service type"""

    def __init__(self, start: int = 1):
        self._start = start
        self._counters = {}
        self._lock = threading.Lock()

    def __call__(self, service_type: ServiceType) -> int:
        with self._lock:
            counter = self._counters.setdefault(service_type, itertools.count(self._start))
            return next(counter)


class TimestampSequence:
    """
    Milliseconds of the injected clock

    Not unique under load; meant for single-process use until the storage
    layer supplies a sequence.
    """

    def __init__(self, clock: Callable[[], datetime]):
        self.clock = clock

    def __call__(self, service_type: ServiceType) -> int:
        return int(self.clock().timestamp() * 1000)
