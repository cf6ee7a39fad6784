from datetime import datetime, timezone

import pytest

from shared.application.message_bus import MessageBus

FIXED_NOW = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    """Clock frozen at 2025-01-01 09:00 UTC"""
    return lambda: FIXED_NOW


@pytest.fixture
def bus():
    """Isolated message bus, so tests do not see the app-wide subscribers"""
    return MessageBus()


@pytest.fixture
def car_payload():
    return {
        "serviceType": "car_rental",
        "carId": "car-42",
        "drivers": [{"name": "Ayşe Yılmaz", "email": "ayse@example.com", "age": 34}],
        "pickupLocation": "Antalya Airport Terminal 1",
        "dropoffLocation": "Hotel Paradise, Lara",
        "pickupTime": "2025-12-15T10:00:00Z",
        "dropoffTime": "2025-12-20T10:00:00Z",
        "pricing": {"total": 250, "currency": "EUR"},
        "specialRequests": "Child seat",
    }


@pytest.fixture
def transfer_payload(car_payload):
    payload = dict(car_payload, serviceType="transfer", transferId="trf-7")
    del payload["carId"]
    return payload


@pytest.fixture
def summer_pricing():
    return {
        "pricing": {"daily": 50, "currency": "EUR"},
        "seasonalPricing": [
            {"name": "Summer", "startDate": "01/07/2025", "endDate": "31/08/2025", "daily": 80},
        ],
    }
