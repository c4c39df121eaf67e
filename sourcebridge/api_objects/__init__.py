"""Typed API objects used across the source operation boundary."""

from sourcebridge.api_objects.types import (
    CloudSource,
    OperationKind,
    SourceGetMetadataRequest,
    SourceGetMetadataResponse,
    SourceMetadata,
    SourceOperationRequest,
    SourceOperationResponse,
    SourceSplitOptions,
    SourceSplitRequest,
    SourceSplitResponse,
    SourceSplitShard,
)

__all__ = [
    "CloudSource",
    "OperationKind",
    "SourceGetMetadataRequest",
    "SourceGetMetadataResponse",
    "SourceMetadata",
    "SourceOperationRequest",
    "SourceOperationResponse",
    "SourceSplitOptions",
    "SourceSplitRequest",
    "SourceSplitResponse",
    "SourceSplitShard",
]
