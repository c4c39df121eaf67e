"""Bounded integer range source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sourcebridge.config import PipelineOptions
from sourcebridge.errors import ReaderExhaustedError, SourceValidationError
from sourcebridge.models import ExecutionContext
from sourcebridge.sources.base import BaseReader, BaseSource
from sourcebridge.sources.registry import register_source


@register_source
@dataclass(slots=True, frozen=True)
class RangeSource(BaseSource):
    """Integers in ``[start, end)``, each accounted as ``element_size_bytes``."""

    type_name: ClassVar[str] = "range"

    start: int
    end: int
    element_size_bytes: int = 8

    def validate(self) -> None:
        if self.start > self.end:
            raise SourceValidationError(f"start {self.start} is after end {self.end}")
        if self.element_size_bytes <= 0:
            raise SourceValidationError(
                f"element_size_bytes must be positive, got {self.element_size_bytes}"
            )

    def create_reader(
        self,
        options: PipelineOptions,
        execution_context: ExecutionContext | None = None,
    ) -> RangeReader:
        return RangeReader(self)

    def split_into_bundles(
        self,
        desired_bundle_size_bytes: int,
        options: PipelineOptions,
    ) -> list[RangeSource]:
        per_bundle = max(1, desired_bundle_size_bytes // self.element_size_bytes)
        if self.end - self.start <= per_bundle:
            return [self]
        bundles: list[RangeSource] = []
        for lo in range(self.start, self.end, per_bundle):
            hi = min(lo + per_bundle, self.end)
            bundles.append(RangeSource(lo, hi, self.element_size_bytes))
        return bundles

    def get_estimated_size_bytes(self, options: PipelineOptions) -> int:
        return (self.end - self.start) * self.element_size_bytes


class RangeReader(BaseReader):
    def __init__(self, source: RangeSource) -> None:
        self._source = source
        self._current: int | None = None

    def start(self) -> bool:
        self._current = self._source.start
        return self._current < self._source.end

    def advance(self) -> bool:
        if self._current is None:
            raise RuntimeError("advance() called before start()")
        self._current += 1
        return self._current < self._source.end

    def get_current(self) -> int:
        if self._current is None or self._current >= self._source.end:
            raise ReaderExhaustedError("No current element")
        return self._current
