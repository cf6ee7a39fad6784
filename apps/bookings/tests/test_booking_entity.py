"""Tests for the Booking aggregate and booking references."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from apps.bookings.domain.entities import Booking, BookingStatus, Driver, ResourceRef, ServiceType
from apps.bookings.domain.errors import (
    BookingImmutable,
    CannotDeleteConfirmedBooking,
    InvalidStatusTransition,
    ReadOnlyFieldChange,
)
from apps.bookings.domain.events import (
    BookingCreated,
    BookingDeleted,
    BookingDetailsUpdated,
    BookingRequoted,
    BookingStatusChanged,
)
from apps.bookings.domain.references import (
    CounterSequence,
    TimestampSequence,
    generate_reference,
    is_valid_reference,
)
from apps.bookings.domain.requests import BookingChange
from apps.bookings.domain.validator import BookingValidator
from shared.domain.value_objects import Money

NOW = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)
LATER = NOW + timedelta(hours=2)


@pytest.fixture
def booking(car_payload):
    validated = BookingValidator(clock=lambda: NOW, sequence=CounterSequence(start=123)).validate(car_payload)
    return Booking.create(validated.unwrap(), now=NOW)


def with_status(booking, status):
    booking.status = status
    booking.clear_events()
    return booking


def test_create_builds_pending_booking_with_event(booking):
    assert booking.status is BookingStatus.PENDING
    assert booking.booking_reference == "BK000123"
    assert booking.car_id == "car-42"
    assert booking.transfer_id is None
    assert booking.created_at == booking.updated_at == NOW

    [event] = booking.events
    assert isinstance(event, BookingCreated)
    assert event.booking_reference == "BK000123"
    assert event.to_dict()["total_price"] == "250.00 EUR"


def test_dropoff_must_follow_pickup(booking):
    with pytest.raises(ValueError):
        Booking(
            booking_reference="BK000001",
            service_type=ServiceType.CAR_RENTAL,
            resource=ResourceRef(ServiceType.CAR_RENTAL, "car-1"),
            drivers=(Driver("Ali", "ali@example.com"),),
            pickup_location="Airport",
            dropoff_location="Hotel",
            pickup_time=booking.pickup_time,
            dropoff_time=booking.pickup_time,
            pricing=Money(Decimal("10")),
        )


def test_resource_kind_must_match_service_type(booking):
    with pytest.raises(ValueError):
        Booking(
            booking_reference="TR000001",
            service_type=ServiceType.TRANSFER,
            resource=ResourceRef(ServiceType.CAR_RENTAL, "car-1"),
            drivers=(Driver("Ali", "ali@example.com"),),
            pickup_location="Airport",
            dropoff_location="Hotel",
            pickup_time=booking.pickup_time,
            dropoff_time=booking.dropoff_time,
            pricing=Money(Decimal("10")),
        )


def test_derived_properties(booking):
    assert booking.primary_driver.name == "Ayşe Yılmaz"
    assert booking.duration_days == 5
    assert booking.formatted_reference == "BK-000123"
    assert booking.can_be_modified(NOW)
    assert not booking.can_be_modified(booking.pickup_time)
    assert booking.can_be_cancelled()
    assert str(booking) == "Booking BK000123 (pending)"

    payload = booking.to_dict()
    assert payload["serviceType"] == "car_rental"
    assert payload["carId"] == "car-42"
    assert payload["transferId"] is None
    assert payload["pricing"] == {"total": "250.00", "currency": "EUR"}


def test_confirm_emits_status_changed_and_keeps_original(booking):
    booking.clear_events()

    updated = booking.apply_change(BookingChange(status="confirmed"), LATER).unwrap()

    assert updated.status is BookingStatus.CONFIRMED
    assert updated.updated_at == LATER
    assert booking.status is BookingStatus.PENDING
    assert updated == booking  # same identity
    [event] = updated.events
    assert isinstance(event, BookingStatusChanged)
    assert (event.old_status, event.new_status) == ("pending", "confirmed")
    assert updated.can_be_modified(NOW)


def test_confirmed_booking_cannot_go_back_to_pending(booking):
    confirmed = with_status(booking, BookingStatus.CONFIRMED)

    result = confirmed.apply_change(BookingChange(status="pending"), LATER)

    assert isinstance(result.error, InvalidStatusTransition)


def test_confirmed_booking_drivers_are_immutable(booking):
    confirmed = with_status(booking, BookingStatus.CONFIRMED)
    change = BookingChange(drivers=(Driver("Mehmet", "mehmet@example.com"),))

    result = confirmed.apply_change(change, LATER)

    assert isinstance(result.error, BookingImmutable)


def test_resending_current_values_is_not_a_modification(booking):
    confirmed = with_status(booking, BookingStatus.CONFIRMED)
    change = BookingChange(
        status="active",
        drivers=confirmed.drivers,
        pickup_location=confirmed.pickup_location,
        identity_values={"booking_reference": "BK000123", "car_id": "car-42"},
    )

    updated = confirmed.apply_change(change, LATER).unwrap()

    assert updated.status is BookingStatus.ACTIVE
    assert [type(event) for event in updated.events] == [BookingStatusChanged]


def test_pending_booking_details_can_be_edited(booking):
    booking.clear_events()
    change = BookingChange(dropoff_location="Kaleiçi Marina", special_requests="")

    updated = booking.apply_change(change, LATER).unwrap()

    assert updated.dropoff_location == "Kaleiçi Marina"
    assert updated.special_requests == ""
    [event] = updated.events
    assert isinstance(event, BookingDetailsUpdated)
    assert event.fields == ("dropoff_location", "special_requests")


def test_reference_cannot_be_rewritten(booking):
    change = BookingChange(identity_values={"booking_reference": "BK999999"})

    result = booking.apply_change(change, LATER)

    assert isinstance(result.error, ReadOnlyFieldChange)
    assert "booking_reference" in result.error.message


def test_requote_until_terminal(booking):
    active = with_status(booking, BookingStatus.ACTIVE)

    updated = active.requote(Money(Decimal("300"), "EUR"), LATER).unwrap()
    assert updated.pricing == Money(Decimal("300"), "EUR")
    [event] = updated.events
    assert isinstance(event, BookingRequoted)
    assert event.old_price == Money(Decimal("250"), "EUR")

    completed = with_status(updated, BookingStatus.COMPLETED)
    assert isinstance(completed.requote(Money(Decimal("1")), LATER).error, BookingImmutable)


def test_active_booking_cannot_be_deleted(booking):
    active = with_status(booking, BookingStatus.ACTIVE)

    result = active.request_deletion(LATER)

    assert isinstance(result.error, CannotDeleteConfirmedBooking)
    assert result.error.message == "Cannot delete active booking; only pending bookings can be deleted"


def test_pending_booking_deletion_emits_event(booking):
    booking.clear_events()

    deleted = booking.request_deletion(LATER).unwrap()

    [event] = deleted.events
    assert isinstance(event, BookingDeleted)
    assert event.booking_reference == "BK000123"


# ===== References =====

def test_generate_reference_pads_and_wraps():
    assert generate_reference(ServiceType.CAR_RENTAL, 42) == "BK000042"
    assert generate_reference(ServiceType.TRANSFER, 1_234_567) == "TR234567"
    with pytest.raises(ValueError):
        generate_reference(ServiceType.CAR_RENTAL, -1)


def test_is_valid_reference():
    assert is_valid_reference("BK000042")
    assert is_valid_reference("TR000042", ServiceType.TRANSFER)
    assert not is_valid_reference("TR000042", ServiceType.CAR_RENTAL)
    assert not is_valid_reference("BK42")
    assert not is_valid_reference("XX000042")


def test_timestamp_sequence_uses_injected_clock():
    sequence = TimestampSequence(lambda: NOW)

    assert sequence(ServiceType.CAR_RENTAL) == int(NOW.timestamp() * 1000)
