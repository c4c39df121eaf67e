from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

from sourcebridge.api_objects.types import (
    OperationKind,
    SourceGetMetadataResponse,
    SourceOperationRequest,
    SourceOperationResponse,
    SourceSplitResponse,
)
from sourcebridge.codec import decode_cloud_source
from sourcebridge.config import BridgeConfig, PipelineOptions
from sourcebridge.errors import UnsupportedOperationError
from sourcebridge.internal.events import EventBus
from sourcebridge.internal.operation_events import (
    emit_operation_completed,
    emit_operation_error,
    emit_operation_started,
)
from sourcebridge.operations.metadata import source_metadata
from sourcebridge.operations.split import split_source
from sourcebridge.sources.base import Source
from sourcebridge.sources.registry import type_tag_for
from sourcebridge.utils.logging import debug_event, get_logger


class SerializedSourceFormat:
    """Executes protocol-level source operations against serialized sources."""

    def __init__(
        self,
        options: PipelineOptions | None = None,
        *,
        config: BridgeConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config or BridgeConfig.default()
        self.options = options if options is not None else self.config.pipeline
        self.event_bus = event_bus
        self.logger = get_logger("sourcebridge.operations.dispatch")

    def perform_source_operation(
        self,
        request: SourceOperationRequest | Mapping[str, Any],
    ) -> SourceOperationResponse:
        if not isinstance(request, SourceOperationRequest):
            request = SourceOperationRequest.from_dict(request)

        kind = request.kind
        source_type: str | None = None
        started = time.monotonic()
        try:
            source = decode_cloud_source(request.payload.source)
            source_type = type_tag_for(source)
            if self.event_bus is not None:
                emit_operation_started(self.event_bus, kind=kind.value, source_type=source_type)
            response = self._execute(request, source)
        except Exception as exc:
            if self.event_bus is not None:
                emit_operation_error(
                    self.event_bus,
                    kind=kind.value,
                    error=str(exc),
                    source_type=source_type,
                )
            raise

        elapsed = time.monotonic() - started
        shards = 0
        if isinstance(response.payload, SourceSplitResponse):
            shards = len(response.payload.shards)
        if self.event_bus is not None:
            emit_operation_completed(
                self.event_bus,
                kind=kind.value,
                source_type=source_type,
                shards=shards,
                duration_seconds=elapsed,
            )
        debug_event(
            self.logger,
            "source_operation_completed",
            kind=kind.value,
            source=source,
            shards=shards,
            duration_seconds=elapsed,
        )
        return response

    def _execute(self, request: SourceOperationRequest, source: Source) -> SourceOperationResponse:
        if request.kind is OperationKind.GET_METADATA:
            payload = SourceGetMetadataResponse(metadata=source_metadata(source, self.options))
        elif request.kind is OperationKind.SPLIT:
            split_options = request.payload.options
            payload = split_source(
                source,
                split_options.desired_shard_size_bytes if split_options else None,
                self.options,
                default_bundle_size_bytes=self.config.split.default_desired_bundle_size_bytes,
            )
        else:
            raise UnsupportedOperationError(f"Unknown source operation request: {request.kind}")
        return SourceOperationResponse(kind=request.kind, payload=payload)
