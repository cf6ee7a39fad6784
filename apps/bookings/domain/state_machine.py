"""
Booking State Machine

Decides whether a requested change to a booking is legal:

    pending ──> confirmed ──> active ──> completed
       │            │
       └──> cancelled <┘

- status may move only along the arrows above (completed and cancelled are terminal)
- drivers, pickup_location and dropoff_location may change only while pending
- id, service_type, car_id, transfer_id and booking_reference never change
- only pending bookings may be deleted

The machine is a pure function of (current status, requested status,
requested field changes). It holds no state and performs no I/O.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Tuple

from apps.bookings.domain.entities import BookingStatus
from apps.bookings.domain.errors import (
    BookingImmutable,
    CannotDeleteConfirmedBooking,
    InvalidStatusTransition,
    ReadOnlyFieldChange,
    TransitionError,
    UnknownStatus,
)
from shared.domain.result import Err, Ok, Result

TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.ACTIVE, BookingStatus.CANCELLED}),
    BookingStatus.ACTIVE: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

# Customer details, editable only while pending
LOCKED_FIELDS = ('drivers', 'pickup_location', 'dropoff_location')

# Fixed at creation
READ_ONLY_FIELDS = ('id', 'service_type', 'car_id', 'transfer_id', 'booking_reference')

EDITABLE_STATUSES = frozenset({BookingStatus.PENDING})
DELETABLE_STATUSES = frozenset({BookingStatus.PENDING})


@dataclass(frozen=True)
class BookingState:
    """Outcome of an accepted change: the status the booking ends up in"""
    status: BookingStatus
    changed_fields: Tuple[str, ...] = ()


def coerce_status(value) -> Result[BookingStatus, UnknownStatus]:
    """Accept a BookingStatus or its string value"""
    if isinstance(value, BookingStatus):
        return Ok(value)
    try:
        return Ok(BookingStatus(value))
    except ValueError:
        return Err(UnknownStatus(status=value))


class BookingStateMachine:
    """
    Legal status transitions and field mutability for bookings

    Usage:
        machine = BookingStateMachine()
        machine.can_transition(BookingStatus.PENDING, BookingStatus.CONFIRMED)  # True

        result = machine.evaluate(BookingStatus.CONFIRMED, requested_status='pending')
        result.error  # InvalidStatusTransition(confirmed -> pending)
    """

    transitions = TRANSITIONS

    def can_transition(self, from_status: BookingStatus, to_status: BookingStatus) -> bool:
        return to_status in self.transitions.get(from_status, frozenset())

    def allowed_targets(self, from_status: BookingStatus) -> FrozenSet[BookingStatus]:
        return self.transitions.get(from_status, frozenset())

    def evaluate(
        self,
        current_status: BookingStatus,
        requested_status=None,
        changed_fields: Iterable[str] = (),
    ) -> Result[BookingState, TransitionError]:
        """
        Check one update request against the current status

        Checks, stopping at the first failure:
        1. no field fixed at creation is being changed
        2. the requested status (if any) is known and reachable from the current one
        3. customer details are changed only while the current status is pending

        Returns:
            Ok(BookingState) with the resulting status, or Err(TransitionError)
        """
        changed = tuple(changed_fields)

        read_only = [name for name in changed if name in READ_ONLY_FIELDS]
        if read_only:
            return Err(ReadOnlyFieldChange(fields=', '.join(read_only)))

        new_status = current_status
        if requested_status is not None:
            coerced = coerce_status(requested_status)
            if coerced.is_err:
                return coerced
            target = coerced.value
            if not self.can_transition(current_status, target):
                return Err(InvalidStatusTransition(from_status=current_status, to_status=target))
            new_status = target

        locked = [name for name in changed if name in LOCKED_FIELDS]
        if locked and current_status not in EDITABLE_STATUSES:
            return Err(BookingImmutable(fields=tuple(locked), status=current_status))

        return Ok(BookingState(status=new_status, changed_fields=changed))

    def check_deletion(self, current_status: BookingStatus) -> Result[BookingStatus, CannotDeleteConfirmedBooking]:
        """Only pending bookings may be deleted"""
        if current_status not in DELETABLE_STATUSES:
            return Err(CannotDeleteConfirmedBooking(status=current_status))
        return Ok(current_status)
