"""In-memory source over a list of JSON-serializable elements."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar

from sourcebridge.config import PipelineOptions
from sourcebridge.errors import ReaderExhaustedError, SourceValidationError
from sourcebridge.models import ExecutionContext
from sourcebridge.sources.base import BaseReader, BaseSource
from sourcebridge.sources.registry import register_source


def _element_size(element: Any) -> int:
    return len(json.dumps(element, ensure_ascii=True, sort_keys=True).encode("utf-8"))


@register_source
@dataclass(slots=True)
class ListSource(BaseSource):
    type_name: ClassVar[str] = "list"

    elements: list[Any] = field(default_factory=list)
    sorted_keys: bool = False

    def validate(self) -> None:
        if not isinstance(self.elements, list):
            raise SourceValidationError(
                f"elements must be a list, got {type(self.elements).__name__}"
            )
        try:
            json.dumps(self.elements)
        except (TypeError, ValueError) as exc:
            raise SourceValidationError(f"elements are not JSON-serializable: {exc}") from exc

    def create_reader(
        self,
        options: PipelineOptions,
        execution_context: ExecutionContext | None = None,
    ) -> ListReader:
        return ListReader(list(self.elements))

    def split_into_bundles(
        self,
        desired_bundle_size_bytes: int,
        options: PipelineOptions,
    ) -> list[ListSource]:
        bundles: list[ListSource] = []
        chunk: list[Any] = []
        chunk_bytes = 0
        for element in self.elements:
            chunk.append(element)
            chunk_bytes += _element_size(element)
            if chunk_bytes >= desired_bundle_size_bytes:
                bundles.append(ListSource(elements=chunk, sorted_keys=self.sorted_keys))
                chunk = []
                chunk_bytes = 0
        if chunk or not bundles:
            bundles.append(ListSource(elements=chunk, sorted_keys=self.sorted_keys))
        return bundles

    def get_estimated_size_bytes(self, options: PipelineOptions) -> int:
        return sum(_element_size(element) for element in self.elements)

    def produces_sorted_keys(self, options: PipelineOptions) -> bool:
        return self.sorted_keys


class ListReader(BaseReader):
    def __init__(self, elements: list[Any]) -> None:
        self._elements = elements
        self._index = -1

    def start(self) -> bool:
        self._index = 0
        return self._index < len(self._elements)

    def advance(self) -> bool:
        self._index += 1
        return self._index < len(self._elements)

    def get_current(self) -> Any:
        if not 0 <= self._index < len(self._elements):
            raise ReaderExhaustedError("No current element")
        return self._elements[self._index]
