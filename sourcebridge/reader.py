"""Reading sessions over serialized sources.

``ReaderIterator`` adapts a source's native ``start``/``advance``/``get_current``
reader to a one-element look-ahead ``has_next``/``next`` iterator. Exactly one
underlying ``start()`` or ``advance()`` call is made per element consumed.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from contextlib import closing
from enum import Enum
from typing import Any

from sourcebridge.codec import decode_source
from sourcebridge.config import PipelineOptions
from sourcebridge.errors import (
    ReaderExhaustedError,
    ReadingSessionError,
    UnsupportedOperationError,
)
from sourcebridge.models import ExecutionContext
from sourcebridge.sources.base import Source, SourceReader


class ReaderState(Enum):
    NOT_STARTED = "not_started"
    PRIMED = "primed"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class ReaderIterator:
    def __init__(self, source: Source, reader: SourceReader) -> None:
        self._source = source
        self._reader = reader
        self._state = ReaderState.NOT_STARTED
        self._next: Any = None
        self._closed = False

    @property
    def state(self) -> ReaderState:
        return self._state

    def has_next(self) -> bool:
        if self._closed:
            raise ReadingSessionError(f"Reading session is closed: {self._source!r}")
        if self._state is ReaderState.FAILED:
            raise ReadingSessionError(
                f"Reading session failed earlier and is no longer usable: {self._source!r}"
            )
        if self._state is ReaderState.NOT_STARTED:
            self._step(self._reader.start, "start")
        return self._state is ReaderState.PRIMED

    def next(self) -> Any:
        if not self.has_next():
            raise ReaderExhaustedError(f"No more elements in source: {self._source!r}")
        element = self._next
        self._step(self._reader.advance, "advance")
        return element

    def _step(self, move: Callable[[], bool], action: str) -> None:
        try:
            available = move()
            element = self._reader.get_current() if available else None
        except Exception as exc:
            self._state = ReaderState.FAILED
            self._next = None
            raise ReadingSessionError(
                f"Failed to {action} reading from source: {self._source!r}"
            ) from exc

        if available:
            self._state = ReaderState.PRIMED
            self._next = element
        else:
            self._state = ReaderState.EXHAUSTED
            self._next = None

    def copy(self) -> ReaderIterator:
        raise UnsupportedOperationError("Copying a reading session is not supported")

    def get_progress(self) -> None:
        return None

    def request_dynamic_split(self, request: Any) -> None:
        return None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._next = None
        self._reader.close()

    def __iter__(self) -> ReaderIterator:
        return self

    def __next__(self) -> Any:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def __enter__(self) -> ReaderIterator:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


class SerializedSourceReader:
    """Decoded source bound to options; each ``iterator()`` is a fresh session."""

    def __init__(
        self,
        source: Source,
        options: PipelineOptions,
        execution_context: ExecutionContext | None = None,
    ) -> None:
        self.source = source
        self.options = options
        self.execution_context = execution_context

    def iterator(self) -> ReaderIterator:
        reader = self.source.create_reader(self.options, self.execution_context)
        return ReaderIterator(self.source, reader)


def create_reader(
    options: PipelineOptions,
    spec: Mapping[str, Any],
    execution_context: ExecutionContext | None = None,
) -> SerializedSourceReader:
    return SerializedSourceReader(decode_source(spec), options, execution_context)


def read_all(
    source: Source,
    options: PipelineOptions,
    execution_context: ExecutionContext | None = None,
) -> list[Any]:
    """Read every element of ``source`` directly, closing the reader on all paths."""
    elements: list[Any] = []
    with closing(source.create_reader(options, execution_context)) as reader:
        available = reader.start()
        while available:
            elements.append(reader.get_current())
            available = reader.advance()
    return elements
