from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import pytest

from sourcebridge.api_objects.types import (
    OperationKind,
    SourceGetMetadataResponse,
    SourceOperationRequest,
    SourceSplitResponse,
)
from sourcebridge.codec import encode_source
from sourcebridge.config import BridgeConfig, PipelineOptions, SplitConfig
from sourcebridge.errors import InvalidSourceError, UnsupportedOperationError
from sourcebridge.internal.events import EventBus
from sourcebridge.operations.dispatch import SerializedSourceFormat
from sourcebridge.sources.collection import ListSource
from sourcebridge.sources.range import RangeSource
from sourcebridge.sources.registry import register_source


@register_source
@dataclass(slots=True, frozen=True)
class SizeServiceRange(RangeSource):
    type_name: ClassVar[str] = "dispatch_size_service_range"

    def get_estimated_size_bytes(self, options: PipelineOptions) -> int:
        if options.get("size_service") == "down":
            raise RuntimeError("size service unavailable")
        return RangeSource.get_estimated_size_bytes(self, options)


def _encoded(source) -> dict:
    return encode_source(source, PipelineOptions()).to_dict()


def test_get_metadata_request_from_wire_dict() -> None:
    source_format = SerializedSourceFormat()
    request = {"getMetadata": {"source": _encoded(ListSource(elements=[1, 22], sorted_keys=True))}}

    response = source_format.perform_source_operation(request)

    assert response.kind is OperationKind.GET_METADATA
    assert isinstance(response.payload, SourceGetMetadataResponse)
    assert response.to_dict() == {
        "getMetadata": {"metadata": {"producesSortedKeys": True, "estimatedSizeBytes": 3}}
    }


def test_split_request_with_options() -> None:
    source_format = SerializedSourceFormat()
    request = {
        "split": {
            "source": _encoded(RangeSource(0, 40)),
            "options": {"desiredShardSizeBytes": "80"},
        }
    }

    response = source_format.perform_source_operation(request)

    assert response.kind is OperationKind.SPLIT
    assert isinstance(response.payload, SourceSplitResponse)
    wire = response.to_dict()
    assert list(wire) == ["split"]
    assert wire["split"]["outcome"] == "SOURCE_SPLIT_OUTCOME_SPLITTING_HAPPENED"
    assert len(wire["split"]["shards"]) == 4
    for shard in wire["split"]["shards"]:
        assert shard["derivationMode"] == "SOURCE_DERIVATION_MODE_INDEPENDENT"
        assert shard["source"]["doesNotNeedSplitting"] is True
        assert shard["source"]["metadata"]["estimatedSizeBytes"] == 80


def test_typed_request_and_configured_default() -> None:
    config = BridgeConfig(split=SplitConfig(default_desired_bundle_size_bytes=160))
    source_format = SerializedSourceFormat(config=config)
    request = SourceOperationRequest.split(
        encode_source(RangeSource(0, 40), PipelineOptions())
    )

    response = source_format.perform_source_operation(request)

    assert len(response.payload.shards) == 2


def test_missing_or_ambiguous_operation_is_rejected() -> None:
    source_format = SerializedSourceFormat()
    encoded = _encoded(RangeSource(0, 1))

    with pytest.raises(UnsupportedOperationError):
        source_format.perform_source_operation({})
    with pytest.raises(UnsupportedOperationError):
        source_format.perform_source_operation({"describe": {"source": encoded}})
    with pytest.raises(UnsupportedOperationError):
        source_format.perform_source_operation(
            {"getMetadata": {"source": encoded}, "split": {"source": encoded}}
        )


def test_events_are_emitted_for_operations() -> None:
    bus = EventBus()
    source_format = SerializedSourceFormat(event_bus=bus)

    source_format.perform_source_operation(
        SourceOperationRequest.split(
            encode_source(RangeSource(0, 10), PipelineOptions()), desired_shard_size_bytes=40
        )
    )

    topics = [event.topic for event in bus.recent()]
    assert topics == ["source.operation.started", "source.operation.completed"]
    started, completed = bus.recent()
    assert started.payload == {"kind": "split", "source_type": "range"}
    assert completed.payload["kind"] == "split"
    assert completed.payload["source_type"] == "range"
    assert completed.payload["shards"] == 2


def test_error_event_and_propagation_for_invalid_source() -> None:
    bus = EventBus()
    errors = []
    bus.subscribe("source.operation.error", errors.append)
    source_format = SerializedSourceFormat(event_bus=bus)

    request = {"getMetadata": {"source": _encoded(RangeSource(3, 0))}}
    with pytest.raises(InvalidSourceError):
        source_format.perform_source_operation(request)

    assert len(errors) == 1
    assert errors[0].payload["kind"] == "getMetadata"
    assert "Invalid source" in errors[0].payload["error"]
    assert errors[0].payload["source_type"] is None
    assert [event.topic for event in bus.recent()] == ["source.operation.error"]


def test_malformed_shard_size_is_rejected_before_decoding() -> None:
    source_format = SerializedSourceFormat()
    request = {
        "split": {
            "source": _encoded(RangeSource(0, 10)),
            "options": {"desiredShardSizeBytes": "big"},
        }
    }

    with pytest.raises(UnsupportedOperationError, match="Malformed split request"):
        source_format.perform_source_operation(request)


def test_error_event_names_decoded_source_type() -> None:
    bus = EventBus()
    source_format = SerializedSourceFormat(
        PipelineOptions(values={"size_service": "down"}), event_bus=bus
    )
    request = SourceOperationRequest.get_metadata(
        encode_source(SizeServiceRange(0, 4), PipelineOptions())
    )

    with pytest.raises(RuntimeError, match="size service unavailable"):
        source_format.perform_source_operation(request)

    started, failed = bus.recent()
    assert started.topic == "source.operation.started"
    assert failed.topic == "source.operation.error"
    assert failed.payload["source_type"] == "dispatch_size_service_range"
