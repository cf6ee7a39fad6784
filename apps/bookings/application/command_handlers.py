"""
Booking Command Handlers

These are the use cases for the booking domain. They read the booking
settings, inject the clock and reference sequence, run the pure domain
logic and publish the resulting domain events through a Unit of Work.

Commands:
- CreateBookingCommand: Validate a booking request and create a PENDING booking
- UpdateBookingCommand: Change status and/or editable fields of a booking
- RequoteBookingCommand: Recalculate the quoted total of a booking
- DeleteBookingCommand: Authorize deletion of a PENDING booking

Call contracts used by the surrounding service:
- validate_booking_creation(raw_input)
- apply_booking_transition(booking, requested_change)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Sequence
import logging

from django.conf import settings
from django.utils import timezone

from apps.bookings.domain.entities import Booking, ServiceType
from apps.bookings.domain.errors import TransitionError, ValidationError
from apps.bookings.domain.references import REFERENCE_PREFIXES, SequenceSource, TimestampSequence
from apps.bookings.domain.requests import BookingChange, ValidatedBookingInput
from apps.bookings.domain.state_machine import BookingStateMachine
from apps.bookings.domain.validator import MAX_DRIVERS, BookingValidator, parse_drivers
from apps.pricing.application.queries import QuoteRentalHandler, QuoteRentalQuery
from apps.pricing.domain.errors import PricingError
from shared.application.uow import UnitOfWork
from shared.domain.result import Err, Ok, Result
from shared.domain.value_objects import SUPPORTED_CURRENCIES

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def reference_prefixes() -> Dict[ServiceType, str]:
    configured = getattr(settings, 'BOOKING_REFERENCE_PREFIXES', None) or {}
    return {
        service_type: configured.get(service_type.value, default)
        for service_type, default in REFERENCE_PREFIXES.items()
    }


def build_validator(clock: Clock | None = None, sequence: SequenceSource | None = None) -> BookingValidator:
    """BookingValidator wired to the project settings"""
    clock = clock or timezone.now
    return BookingValidator(
        clock=clock,
        sequence=sequence or TimestampSequence(clock),
        max_drivers=getattr(settings, 'BOOKING_MAX_DRIVERS', MAX_DRIVERS),
        prefixes=reference_prefixes(),
        supported_currencies=getattr(settings, 'SUPPORTED_CURRENCIES', SUPPORTED_CURRENCIES),
        default_currency=getattr(settings, 'PRICING_DEFAULT_CURRENCY', 'EUR'),
    )


def _codes(errors: Sequence) -> str:
    return ', '.join(error.code for error in errors)


# ===== Call contracts =====

def validate_booking_creation(
    raw_input: Mapping[str, Any],
    clock: Clock | None = None,
    sequence: SequenceSource | None = None,
) -> Result[ValidatedBookingInput, tuple]:
    """
    Validate a booking creation request

    Returns Ok(ValidatedBookingInput) or Err(tuple of every ValidationError found).
    """
    if not isinstance(raw_input, Mapping):
        raw_input = {}
    return build_validator(clock, sequence).validate(raw_input)


def to_booking_change(requested_change) -> Result[BookingChange, ValidationError]:
    """Accept a BookingChange or an update payload (camelCase keys)"""
    if isinstance(requested_change, BookingChange):
        return Ok(requested_change)

    payload = requested_change if requested_change is not None else {}
    if not isinstance(payload, Mapping):
        return Err(ValidationError(
            f"Booking change must be an object, got {type(payload).__name__}",
            value=payload,
        ))
    drivers = None
    if payload.get('drivers') is not None:
        parsed = parse_drivers(payload['drivers'], getattr(settings, 'BOOKING_MAX_DRIVERS', MAX_DRIVERS))
        if parsed.is_err:
            return Err(parsed.error[0])
        drivers = parsed.value
    return Ok(BookingChange.from_payload(payload, drivers=drivers))


def apply_booking_transition(
    booking: Booking,
    requested_change,
    clock: Clock | None = None,
    state_machine: BookingStateMachine | None = None,
) -> Result[Booking, TransitionError]:
    """
    Apply a status change and/or field edit to a booking

    The returned booking carries the domain events of the change; the
    input booking is left untouched. A malformed drivers list in the
    payload is reported as its first ValidationError.
    """
    change = to_booking_change(requested_change)
    if change.is_err:
        return change
    now = (clock or timezone.now)()
    return booking.apply_change(change.value, now, state_machine)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """Command to create a booking from a raw request payload"""
    payload: Mapping[str, Any]


@dataclass
class UpdateBookingCommand:
    """Command to change status and/or editable fields of a booking"""
    booking: Booking
    change: BookingChange | Mapping[str, Any]


@dataclass
class RequoteBookingCommand:
    """Command to recalculate a booking total from the car/listing pricing documents"""
    booking: Booking
    base_pricing: Any
    seasonal_rules: Any = None


@dataclass
class DeleteBookingCommand:
    """Command to delete a booking (pending only)"""
    booking: Booking


# ===== Command Handlers =====

class BookingCommandHandler:
    """Shared wiring: clock, message bus"""

    def __init__(self, clock: Clock | None = None, bus=None):
        self.clock = clock or timezone.now
        self.bus = bus

    def _commit(self, booking: Booking) -> Booking:
        with UnitOfWork(self.bus) as uow:
            uow.collect_events(booking)
        return booking


class CreateBookingHandler(BookingCommandHandler):
    """
    Handler for CreateBooking command

    1. Validate the payload (all violations collected)
    2. Generate the booking reference from the sequence source
    3. Create the PENDING Booking aggregate
    4. Publish BookingCreated
    """

    def __init__(self, clock: Clock | None = None, sequence: SequenceSource | None = None, bus=None):
        super().__init__(clock, bus)
        self.sequence = sequence

    def handle(self, command: CreateBookingCommand) -> Result[Booking, tuple]:
        validated = validate_booking_creation(command.payload, self.clock, self.sequence)
        if validated.is_err:
            logger.warning(f"Booking request rejected: {_codes(validated.error)}")
            return validated

        booking = Booking.create(validated.value, now=self.clock())
        self._commit(booking)
        logger.info(
            f"Booking {booking.booking_reference} created for "
            f"{booking.service_type.value} {booking.resource.resource_id}"
        )
        return Ok(booking)


class UpdateBookingHandler(BookingCommandHandler):
    """
    Handler for UpdateBooking command

    Status and field changes are checked together by the
    BookingStateMachine; the first violation rejects the whole request.
    """

    def __init__(self, clock: Clock | None = None, bus=None, state_machine: BookingStateMachine | None = None):
        super().__init__(clock, bus)
        self.state_machine = state_machine or BookingStateMachine()

    def handle(self, command: UpdateBookingCommand) -> Result[Booking, TransitionError]:
        booking = command.booking
        result = apply_booking_transition(booking, command.change, self.clock, self.state_machine)
        if result.is_err:
            logger.warning(f"Update of booking {booking.booking_reference} rejected: {result.error.code}")
            return result

        updated = result.value
        self._commit(updated)
        if updated.status is not booking.status:
            logger.info(
                f"Booking {booking.booking_reference} moved from "
                f"{booking.status.value} to {updated.status.value}"
            )
        else:
            logger.info(f"Booking {booking.booking_reference} updated")
        return Ok(updated)


class RequoteBookingHandler(BookingCommandHandler):
    """
    Handler for RequoteBooking command

    Quotes the booking's pickup-to-dropoff span with the car/listing
    pricing and stores the new total.
    """

    def __init__(self, clock: Clock | None = None, bus=None, quote_handler: QuoteRentalHandler | None = None):
        super().__init__(clock, bus)
        self.quote_handler = quote_handler or QuoteRentalHandler()

    def handle(self, command: RequoteBookingCommand) -> Result[Booking, PricingError | TransitionError]:
        booking = command.booking
        quote = self.quote_handler.handle(QuoteRentalQuery(
            base_pricing=command.base_pricing,
            seasonal_rules=command.seasonal_rules,
            pickup_time=booking.pickup_time,
            dropoff_time=booking.dropoff_time,
        ))
        if quote.is_err:
            logger.warning(f"Cannot requote booking {booking.booking_reference}: {quote.error.code}")
            return quote

        result = booking.requote(quote.value.total, self.clock())
        if result.is_err:
            logger.warning(f"Requote of booking {booking.booking_reference} rejected: {result.error.code}")
            return result

        updated = result.value
        self._commit(updated)
        logger.info(f"Booking {booking.booking_reference} requoted: {booking.pricing} -> {updated.pricing}")
        return Ok(updated)


class DeleteBookingHandler(BookingCommandHandler):
    """
    Handler for DeleteBooking command

    Only authorizes the deletion and publishes BookingDeleted; removing the
    record is done by the storage collaborator.
    """

    def __init__(self, clock: Clock | None = None, bus=None, state_machine: BookingStateMachine | None = None):
        super().__init__(clock, bus)
        self.state_machine = state_machine or BookingStateMachine()

    def handle(self, command: DeleteBookingCommand) -> Result[Booking, TransitionError]:
        booking = command.booking
        result = booking.request_deletion(self.clock(), self.state_machine)
        if result.is_err:
            logger.warning(f"Deletion of booking {booking.booking_reference} rejected: {result.error.code}")
            return result

        self._commit(result.value)
        logger.info(f"Booking {booking.booking_reference} deleted")
        return result


def delete_booking(booking: Booking, clock: Clock | None = None) -> Result[Booking, TransitionError]:
    return DeleteBookingHandler(clock).handle(DeleteBookingCommand(booking))
