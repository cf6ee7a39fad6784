"""
Booking Event Handlers

Subscribers for booking domain events, wired on the message bus when the
app is ready. The core only records the audit trail; notification and
persistence subscribers belong to the surrounding service.
"""

import logging

from apps.bookings.application.command_handlers import (
    CreateBookingCommand,
    CreateBookingHandler,
    DeleteBookingCommand,
    DeleteBookingHandler,
    RequoteBookingCommand,
    RequoteBookingHandler,
    UpdateBookingCommand,
    UpdateBookingHandler,
)
from apps.bookings.domain.events import (
    BookingCreated,
    BookingDeleted,
    BookingDetailsUpdated,
    BookingRequoted,
    BookingStatusChanged,
)

logger = logging.getLogger(__name__)

BOOKING_EVENTS = (
    BookingCreated,
    BookingStatusChanged,
    BookingDetailsUpdated,
    BookingRequoted,
    BookingDeleted,
)


def log_booking_event(event):
    """Audit trail: one structured record per booking event"""
    logger.info(f"{event.__class__.__name__}: {event.to_dict()}")


def register_handlers(bus):
    for event_type in BOOKING_EVENTS:
        bus.register_event_handler(event_type, log_booking_event)

    commands = {
        CreateBookingCommand: CreateBookingHandler,
        UpdateBookingCommand: UpdateBookingHandler,
        RequoteBookingCommand: RequoteBookingHandler,
        DeleteBookingCommand: DeleteBookingHandler,
    }
    for command_type, handler_class in commands.items():
        if not bus.has_command_handler(command_type):
            bus.register_command_handler(command_type, handler_class().handle)
