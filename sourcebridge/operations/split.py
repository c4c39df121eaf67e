"""Splitting of a decoded source into independent, pre-encoded shards."""

from __future__ import annotations

from sourcebridge.api_objects.types import (
    SourceSplitRequest,
    SourceSplitResponse,
    SourceSplitShard,
)
from sourcebridge.codec import decode_source, encode_source
from sourcebridge.config import PipelineOptions
from sourcebridge.constants import (
    DEFAULT_DESIRED_BUNDLE_SIZE_BYTES,
    DERIVATION_MODE_INDEPENDENT,
    SPLIT_OUTCOME_SPLITTING_HAPPENED,
)
from sourcebridge.errors import InvalidBundleError
from sourcebridge.sources.base import Source
from sourcebridge.utils.logging import debug_event, get_logger

logger = get_logger("sourcebridge.operations.split")


def effective_bundle_size(
    requested: int | None,
    default: int = DEFAULT_DESIRED_BUNDLE_SIZE_BYTES,
) -> int:
    if requested is None or requested <= 0:
        return default
    return requested


def split_source(
    source: Source,
    desired_bundle_size_bytes: int | None,
    options: PipelineOptions,
    *,
    default_bundle_size_bytes: int = DEFAULT_DESIRED_BUNDLE_SIZE_BYTES,
) -> SourceSplitResponse:
    bundle_size = effective_bundle_size(desired_bundle_size_bytes, default_bundle_size_bytes)
    debug_event(logger, "split_started", source=source, bundle_size=bundle_size)

    bundles = source.split_into_bundles(bundle_size, options)
    logger.debug("Splitting produced %s bundles", len(bundles))

    shards: list[SourceSplitShard] = []
    for bundle in bundles:
        try:
            bundle.validate()
        except Exception as exc:
            raise InvalidBundleError(source, bundle) from exc

        cloud_source = encode_source(bundle, options)
        cloud_source.does_not_need_splitting = True
        shards.append(
            SourceSplitShard(source=cloud_source, derivation_mode=DERIVATION_MODE_INDEPENDENT)
        )

    return SourceSplitResponse(outcome=SPLIT_OUTCOME_SPLITTING_HAPPENED, shards=shards)


def perform_split(
    request: SourceSplitRequest,
    options: PipelineOptions,
    *,
    default_bundle_size_bytes: int = DEFAULT_DESIRED_BUNDLE_SIZE_BYTES,
) -> SourceSplitResponse:
    source = decode_source(request.source.spec)
    logger.debug("Splitting source: %r", source)
    requested = request.options.desired_shard_size_bytes if request.options else None
    return split_source(
        source,
        requested,
        options,
        default_bundle_size_bytes=default_bundle_size_bytes,
    )
