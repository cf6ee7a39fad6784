"""Test settings.

In-memory database and fixed domain tunables so tests do not depend on
the developer's environment or .env file.
"""

from .base import *  # noqa: F401,F403

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PRICING_PERIOD_MULTIPLIERS = {'weekly': 7, 'monthly': 30}
PRICING_DEFAULT_CURRENCY = 'EUR'
BOOKING_MAX_DRIVERS = 5

# Let records reach the root logger so pytest's caplog sees them
LOGGING['loggers']['apps'] = {'level': 'DEBUG', 'propagate': True}  # noqa: F405
LOGGING['loggers']['shared'] = {'level': 'DEBUG', 'propagate': True}  # noqa: F405
