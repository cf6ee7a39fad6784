"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
They are published on the message bus once the change has been accepted.
"""

from dataclasses import dataclass
from typing import Tuple
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import Money


@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A new booking was created (status PENDING)

    Triggers:
    - Show the booking in the admin panel queue
    - Notify the customer that the request was received
    """
    booking_id: UUID
    booking_reference: str
    service_type: str
    resource_id: str
    total_price: Money

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update({
            'booking_reference': self.booking_reference,
            'service_type': self.service_type,
            'resource_id': self.resource_id,
            'total_price': str(self.total_price),
        })
        return payload


@dataclass
class BookingStatusChanged(DomainEvent):
    """
    Event: Booking moved along the lifecycle

    Triggers:
    - Notify the customer (confirmation, cancellation)
    - Update dashboard statistics
    """
    booking_id: UUID
    old_status: str
    new_status: str

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update({'old_status': self.old_status, 'new_status': self.new_status})
        return payload


@dataclass
class BookingDetailsUpdated(DomainEvent):
    """Event: Drivers, locations or notes of a booking were edited"""
    booking_id: UUID
    fields: Tuple[str, ...]

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload['fields'] = list(self.fields)
        return payload


@dataclass
class BookingRequoted(DomainEvent):
    """Event: The quoted total of a booking was recalculated"""
    booking_id: UUID
    old_price: Money
    new_price: Money

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update({'old_price': str(self.old_price), 'new_price': str(self.new_price)})
        return payload


@dataclass
class BookingDeleted(DomainEvent):
    """
    Event: A pending booking was deleted

    Only pending bookings can be deleted; the persistence layer removes the
    record when it sees this event.
    """
    booking_id: UUID
    booking_reference: str
