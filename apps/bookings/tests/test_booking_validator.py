"""Tests for booking creation validation."""

import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from apps.bookings.domain.entities import ServiceType
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
)
from apps.bookings.domain.references import CounterSequence
from apps.bookings.domain.requests import CarRentalRequest, TransferRequest
from apps.bookings.domain.validator import BookingValidator, is_valid_email, parse_drivers, parse_instant
from shared.domain.value_objects import Money

NOW = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def validator():
    return BookingValidator(clock=lambda: NOW, sequence=CounterSequence(start=123))


def error_types(result):
    return [type(error) for error in result.error]


def test_valid_car_rental(validator, car_payload):
    result = validator.validate(car_payload)

    assert result.is_ok
    validated = result.value
    assert re.fullmatch(r"BK\d+", validated.booking_reference)
    assert validated.booking_reference == "BK000123"
    assert isinstance(validated.request, CarRentalRequest)
    assert validated.service_type is ServiceType.CAR_RENTAL
    assert validated.resource.car_id == "car-42"
    assert validated.pickup_time == datetime(2025, 12, 15, 10, 0, tzinfo=timezone.utc)
    assert validated.dropoff_time > validated.pickup_time
    assert validated.pricing == Money(Decimal("250"), "EUR")
    assert validated.drivers[0].email == "ayse@example.com"
    assert validated.special_requests == "Child seat"


def test_valid_transfer_gets_tr_reference(validator, transfer_payload):
    result = validator.validate(transfer_payload)

    assert isinstance(result.value.request, TransferRequest)
    assert result.value.booking_reference == "TR000123"
    assert result.value.resource.transfer_id == "trf-7"


def test_transfer_without_transfer_id(validator, transfer_payload):
    del transfer_payload["transferId"]

    result = validator.validate(transfer_payload)

    assert error_types(result) == [MissingTransferId]


def test_car_rental_without_car_id(validator, car_payload):
    car_payload["carId"] = "  "

    assert error_types(validator.validate(car_payload)) == [MissingCarId]


def test_unknown_service_type(validator, car_payload):
    car_payload["serviceType"] = "boat"

    result = validator.validate(car_payload)

    assert error_types(result) == [InvalidServiceType]
    assert result.error[0].to_dict()["service_type"] == "boat"


def test_all_violations_are_collected_in_check_order(validator):
    payload = {
        "serviceType": "car_rental",
        "drivers": [{"name": "Ali", "email": "not-an-email"}],
        "pickupLocation": "",
        "dropoffLocation": "Hotel",
        "pickupTime": "2024-12-31T10:00:00Z",
        "dropoffTime": "2024-12-30T10:00:00Z",
        "pricing": {"total": 0},
    }

    result = validator.validate(payload)

    assert error_types(result) == [
        MissingCarId,
        InvalidEmailFormat,
        MissingLocation,
        PickupInPast,
        DropoffBeforePickup,
        InvalidPricing,
    ]


def test_pickup_exactly_now_is_in_the_past(validator, car_payload):
    car_payload["pickupTime"] = NOW.isoformat()

    assert PickupInPast in error_types(validator.validate(car_payload))


def test_dropoff_equal_to_pickup(validator, car_payload):
    car_payload["dropoffTime"] = car_payload["pickupTime"]

    assert error_types(validator.validate(car_payload)) == [DropoffBeforePickup]


@pytest.mark.parametrize("pickup_offset", [timedelta(minutes=1), timedelta(days=1), timedelta(days=400)])
@pytest.mark.parametrize(
    "rental", [timedelta(days=-2), timedelta(seconds=-1), timedelta(0), timedelta(seconds=1), timedelta(days=5)],
)
def test_validated_dropoff_is_always_after_pickup(validator, car_payload, pickup_offset, rental):
    pickup = NOW + pickup_offset
    car_payload["pickupTime"] = pickup.isoformat()
    car_payload["dropoffTime"] = (pickup + rental).isoformat()

    result = validator.validate(car_payload)

    if rental > timedelta(0):
        assert result.value.dropoff_time > result.value.pickup_time
    else:
        assert error_types(result) == [DropoffBeforePickup]


def test_unparseable_timestamps(validator, car_payload):
    car_payload["pickupTime"] = "next friday"
    car_payload["dropoffTime"] = None

    assert error_types(validator.validate(car_payload)) == [InvalidTimestamp, InvalidTimestamp]


def test_naive_timestamps_are_utc():
    assert parse_instant("2025-12-15T10:00:00") == datetime(2025, 12, 15, 10, 0, tzinfo=timezone.utc)
    assert parse_instant("2025-12-15T13:00:00+03:00") == datetime(2025, 12, 15, 10, 0, tzinfo=timezone.utc)
    assert parse_instant("2025-02-30T10:00:00") is None
    assert parse_instant(1734256800) is None


@pytest.mark.parametrize("pricing", [None, {}, {"total": -10}, {"total": "abc"}, {"total": 0.004}, {"total": "1e30"}, {"total": 100, "currency": "GBP"}])
def test_invalid_pricing(validator, car_payload, pricing):
    car_payload["pricing"] = pricing

    assert error_types(validator.validate(car_payload)) == [InvalidPricing]


def test_pricing_currency_defaults_to_eur(validator, car_payload):
    car_payload["pricing"] = {"total": "199.995"}

    assert validator.validate(car_payload).value.pricing == Money(Decimal("200.00"), "EUR")


def test_drivers_required(validator, car_payload):
    for drivers in (None, [], "Ali"):
        car_payload["drivers"] = drivers
        assert error_types(validator.validate(car_payload)) == [MissingDrivers]


def test_driver_limit():
    drivers = [{"name": f"Driver {i}", "email": f"driver{i}@example.com"} for i in range(6)]

    result = parse_drivers(drivers, max_drivers=5)

    assert error_types(result) == [TooManyDrivers]
    assert result.error[0].message == "At most 5 drivers are allowed"
    assert parse_drivers(drivers[:5], max_drivers=5).is_ok


def test_driver_without_name_and_bad_age():
    result = parse_drivers([
        {"name": "", "email": "a@example.com"},
        {"name": "Bob", "email": "b@example.com", "age": "old"},
    ])

    assert error_types(result) == [InvalidDriver]
    assert result.error[0].index == 0


def test_only_first_invalid_email_is_reported():
    result = parse_drivers([
        {"name": "A", "email": "a@"},
        {"name": "B", "email": "b@example"},
    ])

    assert error_types(result) == [InvalidEmailFormat]
    assert result.error[0].email == "a@"


def test_references_follow_the_sequence_per_service_type(car_payload, transfer_payload):
    validator = BookingValidator(clock=lambda: NOW, sequence=CounterSequence())

    references = [
        validator.validate(car_payload).value.booking_reference,
        validator.validate(car_payload).value.booking_reference,
        validator.validate(transfer_payload).value.booking_reference,
    ]

    assert references == ["BK000001", "BK000002", "TR000001"]


def test_failed_validation_does_not_consume_a_reference(car_payload):
    sequence = CounterSequence()
    validator = BookingValidator(clock=lambda: NOW, sequence=sequence)

    validator.validate(dict(car_payload, carId=None))

    assert validator.validate(car_payload).value.booking_reference == "BK000001"


def test_driver_with_non_string_name(validator, car_payload):
    car_payload["drivers"] = [{"name": 42, "email": "a@example.com"}]

    assert error_types(validator.validate(car_payload)) == [InvalidDriver]


def test_bad_name_and_bad_email_are_both_reported():
    result = parse_drivers([{"name": ["Ali"], "email": "not-an-email"}])

    assert error_types(result) == [InvalidDriver, InvalidEmailFormat]


@pytest.mark.parametrize("email", ["driver@localhost", "driver@example", "@example.com", "driver@.com"])
def test_email_needs_domain_with_tld(email):
    assert not is_valid_email(email)
    assert error_types(parse_drivers([{"name": "A", "email": email}])) == [InvalidEmailFormat]


def test_email_with_tld_is_accepted():
    assert is_valid_email("driver@rental.com.tr")
