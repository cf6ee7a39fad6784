"""
Booking Creation Validation

Validates an incoming booking request (already authenticated and sanitized
upstream) and turns it into a ValidatedBookingInput. Every rule is checked
independently and all violations are returned together, so the admin panel
can show the complete list at once.

Expected payload (camelCase, as sent by the admin panel and storefront):

    {
        "serviceType": "car_rental",            # or "transfer"
        "carId": "...",                         # car_rental only
        "transferId": "...",                    # transfer only
        "drivers": [{"name": "...", "email": "...", "age": 30}],
        "pickupLocation": "Airport Terminal 1",
        "dropoffLocation": "Hotel Paradise",
        "pickupTime": "2025-12-15T10:00:00Z",
        "dropoffTime": "2025-12-20T10:00:00Z",
        "pricing": {"total": 250, "currency": "EUR"},
        "specialRequests": "Child seat"         # optional
    }
"""

from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Sequence, Tuple

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import EmailValidator
from django.utils.dateparse import parse_datetime

from apps.bookings.domain.entities import Driver, ServiceType
from apps.bookings.domain.errors import (
    DropoffBeforePickup,
    InvalidDriver,
    InvalidEmailFormat,
    InvalidPricing,
    InvalidServiceType,
    InvalidTimestamp,
    MissingCarId,
    MissingDrivers,
    MissingLocation,
    MissingTransferId,
    PickupInPast,
    TooManyDrivers,
    ValidationError,
)
from apps.bookings.domain.references import REFERENCE_PREFIXES, SequenceSource, generate_reference
from apps.bookings.domain.requests import CarRentalRequest, TransferRequest, ValidatedBookingInput
from shared.domain.result import Err, Ok, Result
from shared.domain.value_objects import Money, SUPPORTED_CURRENCIES, round_half_up, to_decimal

MAX_DRIVERS = 5

# local@domain.tld only; Django allows bare "localhost" by default
email_validator = EmailValidator(allowlist=[])


def is_valid_email(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        email_validator(value)
    except DjangoValidationError:
        return False
    return True


def parse_instant(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 timestamp into an aware datetime

    Naive timestamps are taken as UTC. Returns None when unparseable.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        try:
            moment = parse_datetime(value.strip())
        except ValueError:
            return None
        if moment is None:
            return None
    else:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def parse_drivers(raw: Any, max_drivers: int = MAX_DRIVERS) -> Result[Tuple[Driver, ...], Tuple[ValidationError, ...]]:
    """
    Parse and check the drivers list

    Reports at most one InvalidDriver and one InvalidEmailFormat (the first
    offending driver of each kind), so error lists stay deterministic.
    """
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)) or not raw:
        return Err((MissingDrivers(),))

    errors: List[ValidationError] = []
    if len(raw) > max_drivers:
        errors.append(TooManyDrivers(limit=max_drivers))

    drivers: List[Driver] = []
    bad_driver = None
    bad_email = None
    for index, item in enumerate(raw):
        if not isinstance(item, Mapping):
            bad_driver = bad_driver or InvalidDriver(index=index)
            continue

        name = item.get('name')
        age = item.get('age')
        valid = True
        if not isinstance(name, str) or not name.strip():
            bad_driver = bad_driver or InvalidDriver(f"Driver #{index} name is required", index=index)
            valid = False
        elif age is not None and (isinstance(age, bool) or not isinstance(age, int) or age < 0):
            bad_driver = bad_driver or InvalidDriver(f"Driver #{index} age must be a whole number", index=index)
            valid = False

        email = item.get('email')
        if not is_valid_email(email):
            bad_email = bad_email or InvalidEmailFormat(email=email, index=index)
            valid = False

        if valid:
            drivers.append(Driver(name=name.strip(), email=email, age=age))

    errors.extend(error for error in (bad_driver, bad_email) if error is not None)
    if errors:
        return Err(tuple(errors))
    return Ok(tuple(drivers))


def _present(value: Any) -> bool:
    return value is not None and str(value).strip() != ''


class BookingValidator:
    """
    Validate booking creation requests

    Checks, each independent, in this order:
    1. serviceType is car_rental or transfer
    2. carId (car_rental) or transferId (transfer) is present
    3. drivers is a non-empty list (at most 5) of drivers with valid emails
    4. pickupLocation and dropoffLocation are non-empty strings
    5. pickupTime and dropoffTime are valid timestamps
    6. pickupTime is strictly in the future
    7. dropoffTime is strictly after pickupTime
    8. pricing has a positive total (and a supported currency)

    On success the booking reference is generated from the injected
    sequence source, keyed by service type.
    """

    def __init__(
        self,
        clock: Callable[[], datetime],
        sequence: SequenceSource,
        max_drivers: int = MAX_DRIVERS,
        prefixes=REFERENCE_PREFIXES,
        supported_currencies: Sequence[str] = SUPPORTED_CURRENCIES,
        default_currency: str = 'EUR',
    ):
        self.clock = clock
        self.sequence = sequence
        self.max_drivers = max_drivers
        self.prefixes = prefixes
        self.supported_currencies = tuple(supported_currencies)
        self.default_currency = default_currency

    def validate(self, payload: Mapping[str, Any]) -> Result[ValidatedBookingInput, Tuple[ValidationError, ...]]:
        errors: List[ValidationError] = []

        # 1. Service type
        service_type = None
        try:
            service_type = ServiceType(payload.get('serviceType'))
        except ValueError:
            errors.append(InvalidServiceType(service_type=payload.get('serviceType')))

        # 2. Resource reference matching the service type
        resource_id = None
        if service_type is ServiceType.CAR_RENTAL:
            resource_id = payload.get('carId')
            if not _present(resource_id):
                errors.append(MissingCarId())
        elif service_type is ServiceType.TRANSFER:
            resource_id = payload.get('transferId')
            if not _present(resource_id):
                errors.append(MissingTransferId())

        # 3. Drivers
        drivers = parse_drivers(payload.get('drivers'), self.max_drivers)
        if drivers.is_err:
            errors.extend(drivers.error)

        # 4. Locations
        locations = {}
        for key, label in (('pickupLocation', 'Pickup location'), ('dropoffLocation', 'Drop-off location')):
            value = payload.get(key)
            if not isinstance(value, str) or not value.strip():
                errors.append(MissingLocation(field=label))
            else:
                locations[key] = value.strip()

        # 5. Timestamps
        times = {}
        for key, label in (('pickupTime', 'Pickup time'), ('dropoffTime', 'Drop-off time')):
            moment = parse_instant(payload.get(key))
            if moment is None:
                errors.append(InvalidTimestamp(field=label, value=payload.get(key)))
            else:
                times[key] = moment

        # 6. Pickup in the future
        pickup_time = times.get('pickupTime')
        if pickup_time is not None and pickup_time <= self.clock():
            errors.append(PickupInPast(pickup_time=pickup_time.isoformat()))

        # 7. Dropoff after pickup
        dropoff_time = times.get('dropoffTime')
        if pickup_time is not None and dropoff_time is not None and dropoff_time <= pickup_time:
            errors.append(DropoffBeforePickup())

        # 8. Pricing
        pricing = self._parse_pricing(payload.get('pricing'))
        if pricing.is_err:
            errors.append(pricing.error)

        if errors:
            return Err(tuple(errors))

        common = dict(
            drivers=drivers.value,
            pickup_location=locations['pickupLocation'],
            dropoff_location=locations['dropoffLocation'],
            pickup_time=pickup_time,
            dropoff_time=dropoff_time,
            pricing=pricing.value,
            special_requests=str(payload.get('specialRequests') or ''),
        )
        if service_type is ServiceType.CAR_RENTAL:
            request = CarRentalRequest(car_id=str(resource_id), **common)
        else:
            request = TransferRequest(transfer_id=str(resource_id), **common)

        reference = generate_reference(service_type, self.sequence(service_type), self.prefixes)
        return Ok(ValidatedBookingInput(request=request, booking_reference=reference))

    def _parse_pricing(self, raw: Any) -> Result[Money, InvalidPricing]:
        if not isinstance(raw, Mapping):
            return Err(InvalidPricing())
        try:
            total = round_half_up(to_decimal(raw.get('total')))
        except ValueError:
            return Err(InvalidPricing())
        if total <= 0:
            return Err(InvalidPricing())

        currency = raw.get('currency') or self.default_currency
        if currency not in self.supported_currencies:
            return Err(InvalidPricing(f"Unsupported currency: {currency}", currency=currency))
        return Ok(Money(total, currency))
