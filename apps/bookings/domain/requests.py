"""
Booking Requests

Typed shapes of what callers send in:

- CarRentalRequest / TransferRequest: a creation request once validated,
  a tagged union keyed by service type, so a car rental always carries a
  car_id and a transfer always carries a transfer_id
- ValidatedBookingInput: a creation request ready to become a PENDING Booking
- BookingChange: an update request (status and/or editable fields)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Tuple, Union

from apps.bookings.domain.entities import BookingStatus, Driver, ResourceRef, ServiceType
from shared.domain.value_objects import Money


@dataclass(frozen=True)
class _BookingRequestFields:
    drivers: Tuple[Driver, ...]
    pickup_location: str
    dropoff_location: str
    pickup_time: datetime
    dropoff_time: datetime
    pricing: Money
    special_requests: str = ''


@dataclass(frozen=True)
class CarRentalRequest(_BookingRequestFields):
    car_id: str = ''
    service_type: ServiceType = field(default=ServiceType.CAR_RENTAL, init=False)

    @property
    def resource(self) -> ResourceRef:
        return ResourceRef(ServiceType.CAR_RENTAL, self.car_id)


@dataclass(frozen=True)
class TransferRequest(_BookingRequestFields):
    transfer_id: str = ''
    service_type: ServiceType = field(default=ServiceType.TRANSFER, init=False)

    @property
    def resource(self) -> ResourceRef:
        return ResourceRef(ServiceType.TRANSFER, self.transfer_id)


BookingRequest = Union[CarRentalRequest, TransferRequest]


@dataclass(frozen=True)
class ValidatedBookingInput:
    """
    A creation request that passed every validation rule

    Carries the generated booking reference and the initial status, so
    Booking.create() needs nothing else.
    """
    request: BookingRequest
    booking_reference: str
    status: BookingStatus = BookingStatus.PENDING

    @property
    def service_type(self) -> ServiceType:
        return self.request.service_type

    @property
    def resource(self) -> ResourceRef:
        return self.request.resource

    @property
    def drivers(self) -> Tuple[Driver, ...]:
        return self.request.drivers

    @property
    def pickup_location(self) -> str:
        return self.request.pickup_location

    @property
    def dropoff_location(self) -> str:
        return self.request.dropoff_location

    @property
    def pickup_time(self) -> datetime:
        return self.request.pickup_time

    @property
    def dropoff_time(self) -> datetime:
        return self.request.dropoff_time

    @property
    def pricing(self) -> Money:
        return self.request.pricing

    @property
    def special_requests(self) -> str:
        return self.request.special_requests


# Update payload keys (camelCase, as the admin panel sends them) -> attribute names
EDITABLE_KEYS = {
    'drivers': 'drivers',
    'pickupLocation': 'pickup_location',
    'dropoffLocation': 'dropoff_location',
    'specialRequests': 'special_requests',
}

IDENTITY_KEYS = {
    'id': 'id',
    'serviceType': 'service_type',
    'carId': 'car_id',
    'transferId': 'transfer_id',
    'bookingReference': 'booking_reference',
}


@dataclass(frozen=True)
class BookingChange:
    """
    An update request against an existing booking

    Attributes left as None are not part of the request. identity_values
    holds any creation-time fields the caller sent along; they are accepted
    only when equal to the booking's own values.
    """
    status: Union[BookingStatus, str, None] = None
    drivers: Tuple[Driver, ...] | None = None
    pickup_location: str | None = None
    dropoff_location: str | None = None
    special_requests: str | None = None
    identity_values: Dict[str, Any] = field(default_factory=dict)

    def field_values(self) -> Dict[str, Any]:
        """Editable fields present in the request"""
        values = {
            name: getattr(self, name)
            for name in EDITABLE_KEYS.values()
            if getattr(self, name) is not None
        }
        if 'drivers' in values:
            values['drivers'] = tuple(values['drivers'])
        return values

    @property
    def is_empty(self) -> bool:
        return self.status is None and not self.field_values() and not self.identity_values

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], drivers: Tuple[Driver, ...] | None = None) -> 'BookingChange':
        """
        Build a change from an update payload

        drivers must already be parsed (see validator.parse_drivers);
        unknown keys are ignored.
        """
        values: Dict[str, Any] = {}
        for key, name in EDITABLE_KEYS.items():
            if key == 'drivers':
                continue
            if payload.get(key) is not None:
                values[name] = payload[key]

        identity = {
            name: _identity_text(payload[key])
            for key, name in IDENTITY_KEYS.items()
            if payload.get(key) is not None
        }

        return cls(
            status=payload.get('status'),
            drivers=drivers,
            identity_values=identity,
            **values,
        )


def _identity_text(value: Any) -> Any:
    if isinstance(value, (ServiceType, BookingStatus)):
        return value.value
    return str(value)
