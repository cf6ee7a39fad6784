"""Base settings for all environments.

This configuration file defines the common settings of the car rental
booking core. There is no HTTP surface here: Django supplies the settings
registry, timezone utilities, validators and management commands. The
domain tunables (pricing multipliers, currencies, reference prefixes,
driver limit) live at the bottom of this module and can be overridden in
`dev.py`, `prod.py` or `test.py`, or through environment variables.
"""

import os
from pathlib import Path

import structlog
from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv(BASE_DIR / ".env")


def get_env(var_name: str, default=None, required: bool = False):
    value = os.environ.get(var_name, default)
    if required and value in (None, ""):
        raise ImproperlyConfigured(f"Missing required environment variable: {var_name}")
    return value


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = get_env('DJANGO_SECRET_KEY', 'replace-me-in-production')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = False

ALLOWED_HOSTS: list[str] = get_env('DJANGO_ALLOWED_HOSTS', '*').split(',')

# Application definition

INSTALLED_APPS = [
    # Domain apps
    'apps.pricing',
    'apps.bookings',
]

# Database
# https://docs.djangoproject.com/en/5.0/ref/settings/#databases
# Bookings are persisted by the surrounding service; no app here has models.

DATABASES = {
    'default': {
        'ENGINE': get_env('DB_ENGINE', 'django.db.backends.sqlite3'),
        'NAME': get_env('DB_NAME', BASE_DIR / 'db.sqlite3'),
    }
}

# Internationalization
# https://docs.djangoproject.com/en/5.0/topics/i18n/

LANGUAGE_CODE = 'tr'

TIME_ZONE = get_env('DJANGO_TIME_ZONE', 'Europe/Istanbul')

USE_I18N = True

USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Logging (structlog rendering stdlib records as JSON)

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

LOG_LEVEL = get_env('LOG_LEVEL', 'INFO')

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "structlog.stdlib.ProcessorFormatter",
            "processor": structlog.processors.JSONRenderer(),
            "foreign_pre_chain": [
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
            ],
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
        }
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "apps": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "shared": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}

# Pricing
# Weekly/monthly rates missing from a pricing document are derived from the
# daily rate with this single multiplier pair.
PRICING_PERIOD_MULTIPLIERS = {
    'weekly': int(get_env('PRICING_WEEKLY_MULTIPLIER', '7')),
    'monthly': int(get_env('PRICING_MONTHLY_MULTIPLIER', '30')),
}
PRICING_DEFAULT_CURRENCY = get_env('PRICING_DEFAULT_CURRENCY', 'EUR')
SUPPORTED_CURRENCIES = ('EUR', 'TRY', 'USD')

# Bookings
BOOKING_REFERENCE_PREFIXES = {
    'car_rental': 'BK',
    'transfer': 'TR',
}
BOOKING_MAX_DRIVERS = int(get_env('BOOKING_MAX_DRIVERS', '5'))
