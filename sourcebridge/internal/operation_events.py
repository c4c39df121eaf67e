"""Helpers for consistent source operation event payloads."""

from __future__ import annotations

from sourcebridge.api_objects.types import (
    SourceOperationCompletedEvent,
    SourceOperationErrorEvent,
    SourceOperationStartedEvent,
)
from sourcebridge.internal.events import EventBus

TOPIC_OPERATION_PREFIX = "source.operation."
TOPIC_OPERATION_STARTED = TOPIC_OPERATION_PREFIX + "started"
TOPIC_OPERATION_COMPLETED = TOPIC_OPERATION_PREFIX + "completed"
TOPIC_OPERATION_ERROR = TOPIC_OPERATION_PREFIX + "error"


def emit_operation_started(bus: EventBus, *, kind: str, source_type: str) -> None:
    payload = SourceOperationStartedEvent(kind=kind, source_type=source_type)
    bus.emit(TOPIC_OPERATION_STARTED, **payload.to_dict())


def emit_operation_completed(
    bus: EventBus,
    *,
    kind: str,
    source_type: str,
    shards: int = 0,
    duration_seconds: float = 0.0,
) -> None:
    payload = SourceOperationCompletedEvent(
        kind=kind,
        source_type=source_type,
        shards=shards,
        duration_seconds=duration_seconds,
    )
    bus.emit(TOPIC_OPERATION_COMPLETED, **payload.to_dict())


def emit_operation_error(
    bus: EventBus,
    *,
    kind: str,
    error: str,
    source_type: str | None = None,
) -> None:
    # source_type is None when the source itself could not be decoded.
    payload = SourceOperationErrorEvent(kind=kind, error=error, source_type=source_type)
    bus.emit(TOPIC_OPERATION_ERROR, **payload.to_dict())
