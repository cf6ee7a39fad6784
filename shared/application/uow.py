"""
Unit of Work Pattern

Collects the domain events raised while a use case runs and publishes
them only when the use case finishes without error.

The core does not own persistence, so there is no database transaction
here: the storage collaborator wraps its own transaction around the
handler and the events follow the same all-or-nothing rule.
"""

from typing import List
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Event-collecting Unit of Work

    Usage:
        with UnitOfWork() as uow:
            updated = booking.apply_change(change, now).unwrap()
            uow.collect_events(updated)
        # Events are published here, unless the block raised
    """

    def __init__(self, bus=None):
        self._bus = bus
        self._events: List[DomainEvent] = []
        self.published: List[DomainEvent] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    def commit(self):
        """Publish every collected event on the message bus"""
        events = self._events.copy()
        self._events.clear()
        if not events:
            return

        from shared.application.message_bus import message_bus

        logger.debug(f"Publishing {len(events)} domain events")
        (self._bus or message_bus).publish_events(events)
        self.published.extend(events)

    def rollback(self):
        """Discard collected events"""
        if self._events:
            logger.warning(f"Rolling back, discarding {len(self._events)} events")
        self._events.clear()

    def collect_events(self, aggregate):
        """
        Collect events from aggregate root

        Extracts all domain events from the aggregate and
        clears them from the aggregate.
        """
        new_events = aggregate.events
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                f"Collected {len(new_events)} events from "
                f"{aggregate.__class__.__name__} (ID: {aggregate.id})"
            )
