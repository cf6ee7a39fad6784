"""Table-driven tests for booking status transitions and field mutability."""

import itertools

import pytest

from apps.bookings.domain.entities import BookingStatus
from apps.bookings.domain.errors import (
    BookingImmutable,
    CannotDeleteConfirmedBooking,
    InvalidStatusTransition,
    ReadOnlyFieldChange,
    UnknownStatus,
)
from apps.bookings.domain.state_machine import BookingStateMachine

LEGAL = {
    (BookingStatus.PENDING, BookingStatus.CONFIRMED),
    (BookingStatus.PENDING, BookingStatus.CANCELLED),
    (BookingStatus.CONFIRMED, BookingStatus.ACTIVE),
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    (BookingStatus.ACTIVE, BookingStatus.COMPLETED),
}

machine = BookingStateMachine()


@pytest.mark.parametrize("current, target", list(itertools.product(BookingStatus, repeat=2)))
def test_transition_is_legal_iff_in_table(current, target):
    result = machine.evaluate(current, requested_status=target)

    if (current, target) in LEGAL:
        assert result.is_ok
        assert result.value.status is target
    else:
        assert result.is_err
        assert isinstance(result.error, InvalidStatusTransition)
        assert result.error.from_status is current
        assert result.error.to_status is target
    assert machine.can_transition(current, target) == ((current, target) in LEGAL)


def test_confirmed_back_to_pending_is_rejected():
    result = machine.evaluate(BookingStatus.CONFIRMED, requested_status="pending")

    assert isinstance(result.error, InvalidStatusTransition)
    assert result.error.message == "Invalid status transition: cannot change confirmed booking to pending"


def test_terminal_statuses_have_no_targets():
    assert machine.allowed_targets(BookingStatus.COMPLETED) == frozenset()
    assert machine.allowed_targets(BookingStatus.CANCELLED) == frozenset()


def test_unknown_status_string_is_rejected():
    result = machine.evaluate(BookingStatus.PENDING, requested_status="archived")

    assert isinstance(result.error, UnknownStatus)
    assert result.error.to_dict()["status"] == "archived"


@pytest.mark.parametrize("field", ["drivers", "pickup_location", "dropoff_location"])
@pytest.mark.parametrize("status", [s for s in BookingStatus if s is not BookingStatus.PENDING])
def test_customer_details_are_locked_after_pending(status, field):
    result = machine.evaluate(status, changed_fields=[field])

    assert isinstance(result.error, BookingImmutable)


def test_customer_details_are_editable_while_pending():
    result = machine.evaluate(
        BookingStatus.PENDING,
        requested_status=BookingStatus.CONFIRMED,
        changed_fields=["drivers", "pickup_location", "special_requests"],
    )

    assert result.is_ok
    assert result.value.status is BookingStatus.CONFIRMED


def test_special_requests_stay_editable_after_confirmation():
    assert machine.evaluate(BookingStatus.ACTIVE, changed_fields=["special_requests"]).is_ok


def test_locked_fields_are_checked_against_current_status():
    # confirming and editing drivers in one request is allowed: the booking is still pending
    assert machine.evaluate(BookingStatus.PENDING, "confirmed", ["drivers"]).is_ok
    # a legal transition does not unlock edits of a confirmed booking
    result = machine.evaluate(BookingStatus.CONFIRMED, "active", ["dropoff_location"])
    assert isinstance(result.error, BookingImmutable)


@pytest.mark.parametrize("field", ["id", "service_type", "car_id", "transfer_id", "booking_reference"])
def test_creation_fields_are_read_only_in_every_status(field):
    for status in BookingStatus:
        result = machine.evaluate(status, changed_fields=[field])
        assert isinstance(result.error, ReadOnlyFieldChange)
        assert field in result.error.message


@pytest.mark.parametrize("status", list(BookingStatus))
def test_only_pending_bookings_can_be_deleted(status):
    result = machine.check_deletion(status)

    if status is BookingStatus.PENDING:
        assert result.is_ok
    else:
        assert isinstance(result.error, CannotDeleteConfirmedBooking)
        assert result.error.code == "cannot_delete_confirmed_booking"
