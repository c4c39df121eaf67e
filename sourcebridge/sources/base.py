"""Source capability contracts and shared base classes."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, ClassVar, Protocol

from sourcebridge.config import PipelineOptions
from sourcebridge.models import ExecutionContext


class SourceReader(Protocol):
    """Native pull reader.

    ``get_current()`` is only valid while the last ``start()``/``advance()``
    call returned True.
    """

    def start(self) -> bool: ...

    def advance(self) -> bool: ...

    def get_current(self) -> Any: ...

    def close(self) -> None: ...


class Source(Protocol):
    """Splittable, validatable producer of elements.

    ``type_name`` is the tag stored in serialized descriptors; ``to_spec`` and
    ``from_spec`` must be exact inverses for reading and splitting purposes.
    """

    type_name: ClassVar[str]

    def validate(self) -> None: ...

    def create_reader(
        self,
        options: PipelineOptions,
        execution_context: ExecutionContext | None = None,
    ) -> SourceReader: ...

    def split_into_bundles(
        self,
        desired_bundle_size_bytes: int,
        options: PipelineOptions,
    ) -> list[Source]: ...

    def get_estimated_size_bytes(self, options: PipelineOptions) -> int: ...

    def produces_sorted_keys(self, options: PipelineOptions) -> bool: ...

    def to_spec(self) -> dict[str, Any]: ...

    @classmethod
    def from_spec(cls, spec: dict[str, Any]) -> Source: ...


class BaseSource:
    """Defaults for dataclass-backed sources.

    Subclasses are expected to be dataclasses whose fields are JSON-serializable.
    """

    type_name: ClassVar[str] = ""

    def validate(self) -> None:
        return None

    def produces_sorted_keys(self, options: PipelineOptions) -> bool:
        return False

    def to_spec(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_spec(cls, spec: dict[str, Any]) -> BaseSource:
        return cls(**spec)


class BaseReader:
    """Context-manager support for readers; close() defaults to a no-op."""

    def close(self) -> None:
        return None

    def __enter__(self) -> BaseReader:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()
