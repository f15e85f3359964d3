"""Append-only notification log.

Successful mutations publish one immutable record per observable event.
Publishing is a separate step from the mutation's return value: the
state machine appends to the log and moves on, and anything that wants
to react (audit sinks, webhooks, the /v1/notifications feed) subscribes
here without the lifecycle code knowing it exists.

Sequence numbers start at 1 and increase by one per record, so a
consumer that remembers the last sequence it saw can resume with
``since(last)``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from anchor_registry.core.metrics import REGISTRY_NOTIFICATIONS
from anchor_registry.models.notification import Event, Notification

logger = logging.getLogger(__name__)

Subscriber = Callable[[Notification], None]


class NotificationLog:
    def __init__(self) -> None:
        self._records: list[Notification] = []
        self._subscribers: list[Subscriber] = []

    def publish(self, event: Event) -> Notification:
        record = Notification(sequence=len(self._records) + 1, event=event)
        self._records.append(record)
        REGISTRY_NOTIFICATIONS.labels(kind=record.kind).inc()
        logger.debug("Published notification seq=%d kind=%s", record.sequence, record.kind)

        for subscriber in list(self._subscribers):
            try:
                subscriber(record)
            except Exception:
                # The mutation is already committed; a broken consumer
                # must not turn a successful operation into a failure.
                logger.exception(
                    "Notification subscriber failed seq=%d kind=%s",
                    record.sequence,
                    record.kind,
                )
        return record

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a callback for every future record. Returns an unsubscribe function."""
        self._subscribers.append(subscriber)

        def _unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return _unsubscribe

    def since(self, after: int = 0, limit: int | None = None) -> list[Notification]:
        """Records with sequence > after, oldest first."""
        start = max(after, 0)
        end = None if limit is None else start + limit
        return self._records[start:end]

    def records(self) -> tuple[Notification, ...]:
        return tuple(self._records)

    @property
    def last_sequence(self) -> int:
        return len(self._records)
