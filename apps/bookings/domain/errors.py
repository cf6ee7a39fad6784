"""
Booking Domain Errors

Two families, both returned as values inside Err results:

- ValidationError: problems with a booking creation request. The validator
  collects every one it finds so the caller can show a complete list.
- TransitionError: a rejected status change, field edit or deletion. The
  state machine stops at the first one since each is a single decision.
"""

from shared.domain.errors import DomainError


# ===== Validation errors =====

class ValidationError(DomainError):
    code = 'validation_error'
    default_message = 'Invalid booking request'


class InvalidServiceType(ValidationError):
    code = 'invalid_service_type'
    default_message = 'Service type must be car_rental or transfer'


class MissingCarId(ValidationError):
    code = 'missing_car_id'
    default_message = 'Car ID required for car rental'


class MissingTransferId(ValidationError):
    code = 'missing_transfer_id'
    default_message = 'Transfer ID required for transfer service'


class MissingDrivers(ValidationError):
    code = 'missing_drivers'
    default_message = 'At least one driver is required'


class TooManyDrivers(ValidationError):
    code = 'too_many_drivers'
    default_message = 'At most {limit} drivers are allowed'


class InvalidDriver(ValidationError):
    code = 'invalid_driver'
    default_message = 'Driver #{index} is invalid'


class InvalidEmailFormat(ValidationError):
    code = 'invalid_email_format'
    default_message = 'Driver email must be valid: {email!r}'


class MissingLocation(ValidationError):
    code = 'missing_location'
    default_message = '{field} is required'


class InvalidTimestamp(ValidationError):
    code = 'invalid_timestamp'
    default_message = '{field} must be a valid date and time'


class PickupInPast(ValidationError):
    code = 'pickup_in_past'
    default_message = 'Pickup time must be in the future'


class DropoffBeforePickup(ValidationError):
    code = 'dropoff_before_pickup'
    default_message = 'Dropoff time must be after pickup time'


class InvalidPricing(ValidationError):
    code = 'invalid_pricing'
    default_message = 'Pricing with a positive total is required'


# ===== Transition errors =====

class TransitionError(DomainError):
    code = 'transition_error'
    default_message = 'Booking change rejected'


class InvalidStatusTransition(TransitionError):
    code = 'invalid_status_transition'
    default_message = 'Invalid status transition: cannot change {from_status.value} booking to {to_status.value}'


class UnknownStatus(TransitionError):
    code = 'unknown_status'
    default_message = 'Status must be one of: pending, confirmed, active, completed, cancelled (got {status!r})'


class BookingImmutable(TransitionError):
    code = 'booking_immutable'
    default_message = 'Customer details cannot be modified after confirmation'


class ReadOnlyFieldChange(TransitionError):
    code = 'read_only_field'
    default_message = 'Fields cannot be changed after creation: {fields}'


class CannotDeleteConfirmedBooking(TransitionError):
    code = 'cannot_delete_confirmed_booking'
    default_message = 'Cannot delete {status.value} booking; only pending bookings can be deleted'
