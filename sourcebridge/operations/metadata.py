from __future__ import annotations

from sourcebridge.api_objects.types import (
    SourceGetMetadataRequest,
    SourceGetMetadataResponse,
    SourceMetadata,
)
from sourcebridge.codec import decode_source
from sourcebridge.config import PipelineOptions
from sourcebridge.sources.base import Source


def source_metadata(source: Source, options: PipelineOptions) -> SourceMetadata:
    """Report sortedness and size verbatim; failures are not swallowed here."""
    return SourceMetadata(
        produces_sorted_keys=source.produces_sorted_keys(options),
        estimated_size_bytes=source.get_estimated_size_bytes(options),
    )


def perform_get_metadata(
    request: SourceGetMetadataRequest,
    options: PipelineOptions,
) -> SourceGetMetadataResponse:
    source = decode_source(request.source.spec)
    return SourceGetMetadataResponse(metadata=source_metadata(source, options))
