"""In-process event bus for source operation observability.

Only the most recent ``history`` events are retained. Subscriber errors
propagate to the emitter.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sourcebridge.models import utc_now

WILDCARD_TOPIC = "*"
DEFAULT_EVENT_HISTORY = 256


@dataclass(slots=True)
class InternalEvent:
    topic: str
    ts: datetime
    payload: dict[str, Any] = field(default_factory=dict)


EventCallback = Callable[[InternalEvent], None]


class EventBus:
    def __init__(self, history: int = DEFAULT_EVENT_HISTORY) -> None:
        self._subscribers: dict[str, list[EventCallback]] = defaultdict(list)
        self._history: deque[InternalEvent] = deque(maxlen=max(history, 0))

    def subscribe(self, topic: str, callback: EventCallback) -> Callable[[], None]:
        """Call ``callback`` for ``topic`` (or every topic with ``"*"``).

        Returns a function that removes the subscription.
        """
        self._subscribers[topic].append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(topic, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def emit(self, topic: str, **payload: Any) -> InternalEvent:
        event = InternalEvent(topic=topic, ts=utc_now(), payload=payload)
        self._history.append(event)

        targets = [*self._subscribers.get(topic, []), *self._subscribers.get(WILDCARD_TOPIC, [])]
        for callback in targets:
            callback(event)
        return event

    def recent(self, limit: int = 100, *, topic_prefix: str | None = None) -> list[InternalEvent]:
        if limit <= 0:
            return []
        events = [
            event
            for event in self._history
            if topic_prefix is None or event.topic.startswith(topic_prefix)
        ]
        return events[-limit:]
