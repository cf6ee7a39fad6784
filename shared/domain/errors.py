"""
Domain Errors

Base class for every error the domain reports. Domain errors are returned
inside ``Err`` results rather than raised across public call contracts, so
each one carries a stable machine-readable ``code`` and its diagnostic
context.
"""

from enum import Enum
from typing import Any, Dict


class DomainError(Exception):
    """
    Base class for all domain errors

    Subclasses set ``code`` and ``default_message``. Extra keyword arguments
    become the error context (e.g. the attempted from/to statuses).
    """
    code = 'domain_error'
    default_message = 'Domain rule violated'

    def __init__(self, message: str | None = None, **context: Any):
        self.message = message or self.default_message.format(**context)
        self.context: Dict[str, Any] = context
        super().__init__(self.message)

    def __getattr__(self, name: str) -> Any:
        context = self.__dict__.get('context', {})
        if name in context:
            return context[name]
        raise AttributeError(name)

    def to_dict(self) -> dict:
        """Convert error to dictionary for API responses"""
        payload = {'code': self.code, 'message': self.message}
        payload.update({key: _plain(value) for key, value in self.context.items()})
        return payload

    def __eq__(self, other):
        if not isinstance(other, DomainError):
            return NotImplemented
        return (type(self) is type(other) and self.message == other.message
                and self.context == other.context)

    def __hash__(self):
        return hash((type(self), self.message))

    def __repr__(self):
        return f"{self.__class__.__name__}({self.message!r})"


def _plain(value: Any) -> Any:
    """Render enums and tuples in context so to_dict() is JSON friendly"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (tuple, list, set, frozenset)):
        return [_plain(item) for item in value]
    return value
