from __future__ import annotations

import pytest

from sourcebridge.api_objects.types import (
    CloudSource,
    OperationKind,
    SourceGetMetadataRequest,
    SourceMetadata,
    SourceOperationRequest,
    SourceOperationResponse,
    SourceSplitResponse,
)
from sourcebridge.errors import UnsupportedOperationError


def test_request_kind_must_match_payload() -> None:
    payload = SourceGetMetadataRequest(source=CloudSource(spec={}))

    with pytest.raises(UnsupportedOperationError):
        SourceOperationRequest(kind=OperationKind.SPLIT, payload=payload)


def test_split_request_wire_form() -> None:
    request = SourceOperationRequest.split(CloudSource(spec={"serialized_source": "eA=="}), 1024)

    assert request.to_dict() == {
        "split": {
            "source": {"spec": {"serialized_source": "eA=="}},
            "options": {"desiredShardSizeBytes": 1024},
        }
    }
    assert SourceOperationRequest.from_dict(request.to_dict()) == request


def test_metadata_omits_unknown_fields() -> None:
    assert SourceMetadata().to_dict() == {}
    parsed = SourceMetadata.from_dict({"producesSortedKeys": False, "estimatedSizeBytes": "12"})
    assert parsed == SourceMetadata(produces_sorted_keys=False, estimated_size_bytes=12)


def test_response_from_dict() -> None:
    response = SourceOperationResponse.from_dict(
        {"split": {"outcome": "SOURCE_SPLIT_OUTCOME_SPLITTING_HAPPENED", "shards": []}}
    )
    assert response.kind is OperationKind.SPLIT
    assert isinstance(response.payload, SourceSplitResponse)

    with pytest.raises(UnsupportedOperationError):
        SourceOperationResponse.from_dict({})


def test_malformed_request_bodies_are_protocol_errors() -> None:
    source = {"spec": {"serialized_source": "eA=="}}

    for wire in (
        {"split": []},
        {"getMetadata": "source"},
        {"split": {"source": source, "options": {"desiredShardSizeBytes": "big"}}},
        {"split": {"source": source, "options": ["desiredShardSizeBytes"]}},
        {"getMetadata": {"source": "not-a-cloud-source"}},
    ):
        with pytest.raises(UnsupportedOperationError):
            SourceOperationRequest.from_dict(wire)


def test_non_mapping_request_is_rejected() -> None:
    with pytest.raises(UnsupportedOperationError, match="must be a mapping"):
        SourceOperationRequest.from_dict(["split"])
