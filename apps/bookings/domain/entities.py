"""
Booking Domain Entities

Core business entities for the booking domain:
- Booking: Main aggregate representing a car rental or transfer reservation
- BookingStatus: FSM states for booking lifecycle
- ServiceType: what the booking reserves
- Driver: a driver listed on the booking
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Tuple
import math

from shared.domain.base import Aggregate, ValueObject
from shared.domain.result import Err, Ok, Result
from shared.domain.value_objects import Money


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (admin confirmed the reservation)
    - PENDING -> CANCELLED
    - CONFIRMED -> ACTIVE (vehicle handed over / transfer under way)
    - CONFIRMED -> CANCELLED
    - ACTIVE -> COMPLETED (vehicle returned / transfer finished)

    COMPLETED and CANCELLED are terminal.
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    ACTIVE = 'active'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.COMPLETED, BookingStatus.CANCELLED)


class ServiceType(Enum):
    """Service type discriminator"""
    CAR_RENTAL = 'car_rental'
    TRANSFER = 'transfer'

    @property
    def resource_field(self) -> str:
        """Request field naming the reserved resource"""
        return 'carId' if self is ServiceType.CAR_RENTAL else 'transferId'


@dataclass(frozen=True)
class Driver(ValueObject):
    """Driver listed on a booking; has no lifecycle of its own"""
    name: str
    email: str
    age: int | None = None

    def to_dict(self) -> dict:
        return {'name': self.name, 'email': self.email, 'age': self.age}


@dataclass(frozen=True)
class ResourceRef(ValueObject):
    """
    The car or transfer a booking reserves

    The kind always matches the booking's service type: a car_rental booking
    references a car, a transfer booking references a transfer.
    """
    service_type: ServiceType
    resource_id: str

    @property
    def car_id(self) -> str | None:
        return self.resource_id if self.service_type is ServiceType.CAR_RENTAL else None

    @property
    def transfer_id(self) -> str | None:
        return self.resource_id if self.service_type is ServiceType.TRANSFER else None


@dataclass(kw_only=True, eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a reservation of a car or a transfer.
    Instances are built by Booking.create() from a validated request and
    changed only through apply_change(), requote() and request_deletion(),
    which return a new Booking carrying the resulting domain event.

    Key invariants:
    - resource kind matches service_type
    - dropoff_time > pickup_time
    - drivers, pickup_location and dropoff_location change only while pending
    - status moves only along the BookingStateMachine transition table
    - id, service_type, resource and booking_reference never change
    """

    booking_reference: str
    service_type: ServiceType
    resource: ResourceRef
    drivers: Tuple[Driver, ...]
    pickup_location: str
    dropoff_location: str
    pickup_time: datetime
    dropoff_time: datetime
    pricing: Money
    status: BookingStatus = BookingStatus.PENDING
    special_requests: str = ''

    def __post_init__(self):
        self.drivers = tuple(self.drivers)
        if self.resource.service_type is not self.service_type:
            raise ValueError(
                f"Resource kind {self.resource.service_type.value} does not match "
                f"service type {self.service_type.value}"
            )
        if self.dropoff_time <= self.pickup_time:
            raise ValueError("Dropoff time must be after pickup time")

    @classmethod
    def create(cls, validated, now: datetime) -> 'Booking':
        """
        Create a PENDING booking from a ValidatedBookingInput

        Events: BookingCreated
        """
        from apps.bookings.domain.events import BookingCreated

        booking = cls(
            booking_reference=validated.booking_reference,
            service_type=validated.service_type,
            resource=validated.resource,
            drivers=validated.drivers,
            pickup_location=validated.pickup_location,
            dropoff_location=validated.dropoff_location,
            pickup_time=validated.pickup_time,
            dropoff_time=validated.dropoff_time,
            pricing=validated.pricing,
            status=BookingStatus.PENDING,
            special_requests=validated.special_requests,
            created_at=now,
            updated_at=now,
        )
        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            occurred_at=now,
            booking_id=booking.id,
            booking_reference=booking.booking_reference,
            service_type=booking.service_type.value,
            resource_id=booking.resource.resource_id,
            total_price=booking.pricing,
        ))
        return booking

    def apply_change(self, change, now: datetime, state_machine=None) -> Result['Booking', 'TransitionError']:
        """
        Apply a BookingChange (status and/or editable fields)

        Only fields whose value actually differs count as modified, so
        resending the current drivers or locations is harmless.
        Events: BookingStatusChanged and/or BookingDetailsUpdated
        """
        from apps.bookings.domain.events import BookingDetailsUpdated, BookingStatusChanged
        from apps.bookings.domain.state_machine import BookingStateMachine

        machine = state_machine or BookingStateMachine()
        modified = {
            name: value for name, value in change.field_values().items()
            if getattr(self, name) != value
        }
        current_identity = self.identity_values()
        rewritten = tuple(
            name for name, value in change.identity_values.items()
            if current_identity.get(name) != value
        )

        decision = machine.evaluate(
            self.status,
            requested_status=change.status,
            changed_fields=rewritten + tuple(modified),
        )
        if decision.is_err:
            return decision

        new_status = decision.value.status
        updated = replace(self, status=new_status, updated_at=now, **modified)

        if new_status is not self.status:
            updated.add_event(BookingStatusChanged(
                aggregate_id=self.id,
                occurred_at=now,
                booking_id=self.id,
                old_status=self.status.value,
                new_status=new_status.value,
            ))
        if modified:
            updated.add_event(BookingDetailsUpdated(
                aggregate_id=self.id,
                occurred_at=now,
                booking_id=self.id,
                fields=tuple(sorted(modified)),
            ))
        return Ok(updated)

    def requote(self, total: Money, now: datetime) -> Result['Booking', 'TransitionError']:
        """
        Replace the quoted price

        Allowed until the booking reaches a terminal status.
        Events: BookingRequoted
        """
        from apps.bookings.domain.errors import BookingImmutable
        from apps.bookings.domain.events import BookingRequoted

        if self.status.is_terminal:
            return Err(BookingImmutable(
                f"Cannot requote {self.status.value} booking",
                fields=('pricing',),
                status=self.status,
            ))

        updated = replace(self, pricing=total, updated_at=now)
        updated.add_event(BookingRequoted(
            aggregate_id=self.id,
            occurred_at=now,
            booking_id=self.id,
            old_price=self.pricing,
            new_price=total,
        ))
        return Ok(updated)

    def request_deletion(self, now: datetime, state_machine=None) -> Result['Booking', 'TransitionError']:
        """
        Authorize physical deletion (PENDING only)

        The returned booking carries BookingDeleted; removing the record is
        up to the persistence layer.
        """
        from apps.bookings.domain.events import BookingDeleted
        from apps.bookings.domain.state_machine import BookingStateMachine

        machine = state_machine or BookingStateMachine()
        decision = machine.check_deletion(self.status)
        if decision.is_err:
            return decision

        deleted = replace(self, updated_at=now)
        deleted.add_event(BookingDeleted(
            aggregate_id=self.id,
            occurred_at=now,
            booking_id=self.id,
            booking_reference=self.booking_reference,
        ))
        return Ok(deleted)

    def identity_values(self) -> dict:
        """Fields fixed at creation, keyed the way change requests name them"""
        return {
            'id': str(self.id),
            'service_type': self.service_type.value,
            'car_id': self.car_id,
            'transfer_id': self.transfer_id,
            'booking_reference': self.booking_reference,
        }

    @property
    def car_id(self) -> str | None:
        return self.resource.car_id

    @property
    def transfer_id(self) -> str | None:
        return self.resource.transfer_id

    @property
    def primary_driver(self) -> Driver:
        """First driver in the list"""
        return self.drivers[0]

    @property
    def duration_days(self) -> int:
        """Started days between pickup and dropoff"""
        return math.ceil((self.dropoff_time - self.pickup_time) / timedelta(days=1))

    @property
    def formatted_reference(self) -> str:
        """BK000123 -> BK-000123"""
        return f"{self.booking_reference[:2]}-{self.booking_reference[2:]}"

    def can_be_modified(self, now: datetime) -> bool:
        """Pending or confirmed, and pickup still ahead"""
        return self.status in (BookingStatus.PENDING, BookingStatus.CONFIRMED) and now < self.pickup_time

    def can_be_cancelled(self) -> bool:
        return self.status in (BookingStatus.PENDING, BookingStatus.CONFIRMED)

    def to_dict(self) -> dict:
        """Serialize using the API's camelCase field names"""
        return {
            'id': str(self.id),
            'bookingReference': self.booking_reference,
            'serviceType': self.service_type.value,
            'carId': self.car_id,
            'transferId': self.transfer_id,
            'drivers': [driver.to_dict() for driver in self.drivers],
            'pickupLocation': self.pickup_location,
            'dropoffLocation': self.dropoff_location,
            'pickupTime': self.pickup_time.isoformat(),
            'dropoffTime': self.dropoff_time.isoformat(),
            'pricing': {'total': str(self.pricing.amount), 'currency': self.pricing.currency},
            'status': self.status.value,
            'specialRequests': self.special_requests,
            'createdAt': self.created_at.isoformat(),
            'updatedAt': self.updated_at.isoformat(),
        }

    def __str__(self):
        return f"Booking {self.booking_reference} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, booking_reference={self.booking_reference}, "
            f"status={self.status.value}, service_type={self.service_type.value})"
        )
