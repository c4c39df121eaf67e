"""Type-safe objects for the source operation protocol."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from sourcebridge.errors import UnsupportedOperationError


def _optional_int(value: Any) -> int | None:
    # int64 fields may arrive as JSON strings.
    if value is None:
        return None
    return int(value)


@dataclass(slots=True)
class SourceMetadata:
    produces_sorted_keys: bool | None = None
    estimated_size_bytes: int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.produces_sorted_keys is not None:
            payload["producesSortedKeys"] = self.produces_sorted_keys
        if self.estimated_size_bytes is not None:
            payload["estimatedSizeBytes"] = self.estimated_size_bytes
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SourceMetadata:
        sorted_raw = payload.get("producesSortedKeys")
        return cls(
            produces_sorted_keys=None if sorted_raw is None else bool(sorted_raw),
            estimated_size_bytes=_optional_int(payload.get("estimatedSizeBytes")),
        )


@dataclass(slots=True)
class CloudSource:
    """Encoded source descriptor: the property bag plus optional metadata."""

    spec: dict[str, Any]
    metadata: SourceMetadata | None = None
    does_not_need_splitting: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"spec": dict(self.spec)}
        if self.metadata is not None:
            payload["metadata"] = self.metadata.to_dict()
        if self.does_not_need_splitting is not None:
            payload["doesNotNeedSplitting"] = self.does_not_need_splitting
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> CloudSource:
        metadata_raw = payload.get("metadata")
        flag = payload.get("doesNotNeedSplitting")
        return cls(
            spec=dict(payload.get("spec") or {}),
            metadata=SourceMetadata.from_dict(metadata_raw) if metadata_raw is not None else None,
            does_not_need_splitting=None if flag is None else bool(flag),
        )


@dataclass(slots=True)
class SourceSplitOptions:
    desired_shard_size_bytes: int | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.desired_shard_size_bytes is None:
            return {}
        return {"desiredShardSizeBytes": self.desired_shard_size_bytes}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SourceSplitOptions:
        return cls(desired_shard_size_bytes=_optional_int(payload.get("desiredShardSizeBytes")))


@dataclass(slots=True)
class SourceSplitRequest:
    source: CloudSource
    options: SourceSplitOptions | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"source": self.source.to_dict()}
        if self.options is not None:
            payload["options"] = self.options.to_dict()
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SourceSplitRequest:
        options_raw = payload.get("options")
        return cls(
            source=CloudSource.from_dict(payload.get("source") or {}),
            options=SourceSplitOptions.from_dict(options_raw) if options_raw is not None else None,
        )


@dataclass(slots=True)
class SourceSplitShard:
    source: CloudSource
    derivation_mode: str

    def to_dict(self) -> dict[str, Any]:
        return {"derivationMode": self.derivation_mode, "source": self.source.to_dict()}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SourceSplitShard:
        return cls(
            source=CloudSource.from_dict(payload.get("source") or {}),
            derivation_mode=str(payload.get("derivationMode", "")),
        )


@dataclass(slots=True)
class SourceSplitResponse:
    outcome: str
    shards: list[SourceSplitShard] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"outcome": self.outcome, "shards": [shard.to_dict() for shard in self.shards]}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SourceSplitResponse:
        return cls(
            outcome=str(payload.get("outcome", "")),
            shards=[SourceSplitShard.from_dict(item) for item in payload.get("shards", [])],
        )


@dataclass(slots=True)
class SourceGetMetadataRequest:
    source: CloudSource

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source.to_dict()}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SourceGetMetadataRequest:
        return cls(source=CloudSource.from_dict(payload.get("source") or {}))


@dataclass(slots=True)
class SourceGetMetadataResponse:
    metadata: SourceMetadata

    def to_dict(self) -> dict[str, Any]:
        return {"metadata": self.metadata.to_dict()}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SourceGetMetadataResponse:
        return cls(metadata=SourceMetadata.from_dict(payload.get("metadata") or {}))


class OperationKind(str, Enum):
    GET_METADATA = "getMetadata"
    SPLIT = "split"


_REQUEST_TYPES: dict[OperationKind, type] = {
    OperationKind.GET_METADATA: SourceGetMetadataRequest,
    OperationKind.SPLIT: SourceSplitRequest,
}

_RESPONSE_TYPES: dict[OperationKind, type] = {
    OperationKind.GET_METADATA: SourceGetMetadataResponse,
    OperationKind.SPLIT: SourceSplitResponse,
}


def _kind_from_wire(payload: Mapping[str, Any], what: str) -> OperationKind:
    if not isinstance(payload, Mapping):
        raise UnsupportedOperationError(
            f"Source operation {what} must be a mapping, got {type(payload).__name__}"
        )
    present = [kind for kind in OperationKind if payload.get(kind.value) is not None]
    if not present:
        raise UnsupportedOperationError(f"Unknown source operation {what}")
    if len(present) > 1:
        names = ", ".join(kind.value for kind in present)
        raise UnsupportedOperationError(f"Source operation {what} sets multiple kinds: {names}")
    return present[0]


def _body_from_wire(
    payload: Mapping[str, Any],
    kind: OperationKind,
    body_types: dict[OperationKind, type],
    what: str,
) -> Any:
    body = payload[kind.value]
    if not isinstance(body, Mapping):
        raise UnsupportedOperationError(
            f"Source operation {what} body for {kind.value} must be a mapping"
        )
    try:
        return body_types[kind].from_dict(body)
    except (TypeError, ValueError, AttributeError) as exc:
        raise UnsupportedOperationError(f"Malformed {kind.value} {what}: {exc}") from exc


@dataclass(slots=True)
class SourceOperationRequest:
    kind: OperationKind
    payload: SourceGetMetadataRequest | SourceSplitRequest

    def __post_init__(self) -> None:
        expected = _REQUEST_TYPES.get(self.kind)
        if expected is None or not isinstance(self.payload, expected):
            raise UnsupportedOperationError(
                f"Payload {type(self.payload).__name__} does not match operation kind {self.kind}"
            )

    @classmethod
    def get_metadata(cls, source: CloudSource) -> SourceOperationRequest:
        return cls(kind=OperationKind.GET_METADATA, payload=SourceGetMetadataRequest(source=source))

    @classmethod
    def split(
        cls,
        source: CloudSource,
        desired_shard_size_bytes: int | None = None,
    ) -> SourceOperationRequest:
        options = None
        if desired_shard_size_bytes is not None:
            options = SourceSplitOptions(desired_shard_size_bytes=desired_shard_size_bytes)
        payload = SourceSplitRequest(source=source, options=options)
        return cls(kind=OperationKind.SPLIT, payload=payload)

    def to_dict(self) -> dict[str, Any]:
        return {self.kind.value: self.payload.to_dict()}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SourceOperationRequest:
        kind = _kind_from_wire(payload, "request")
        body = _body_from_wire(payload, kind, _REQUEST_TYPES, "request")
        return cls(kind=kind, payload=body)


@dataclass(slots=True)
class SourceOperationResponse:
    kind: OperationKind
    payload: SourceGetMetadataResponse | SourceSplitResponse

    def to_dict(self) -> dict[str, Any]:
        return {self.kind.value: self.payload.to_dict()}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SourceOperationResponse:
        kind = _kind_from_wire(payload, "response")
        body = _body_from_wire(payload, kind, _RESPONSE_TYPES, "response")
        return cls(kind=kind, payload=body)


@dataclass(slots=True)
class SourceOperationStartedEvent:
    kind: str
    source_type: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class SourceOperationCompletedEvent:
    kind: str
    source_type: str
    shards: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class SourceOperationErrorEvent:
    kind: str
    error: str
    source_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
