"""Development settings for the car rental booking core.

This module extends the base settings with development specific
configuration: debug mode and human-readable console logs instead of JSON.
Do not use these settings in production!
"""

import structlog

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Colourless console renderer, one line per record
LOGGING['formatters']['json']['processor'] = structlog.dev.ConsoleRenderer(colors=False)  # noqa: F405
LOGGING['loggers']['apps']['level'] = 'DEBUG'  # noqa: F405
