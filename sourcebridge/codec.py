"""Encoding of sources into opaque property bags and back.

A source travels as a ``CloudSource`` whose ``spec`` holds the base64 of the
registry-serialized source under ``serialized_source``. Metadata is attached
on encode; the size estimate is best-effort.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from typing import Any

from sourcebridge.api_objects.types import CloudSource, SourceMetadata
from sourcebridge.config import PipelineOptions
from sourcebridge.constants import OBJECT_TYPE_KEY, SERIALIZED_SOURCE, SOURCE_FORMAT_TYPE
from sourcebridge.errors import InvalidSourceError, SourceDecodeError
from sourcebridge.sources.base import Source
from sourcebridge.sources.registry import deserialize_source, serialize_source
from sourcebridge.utils.logging import get_logger

logger = get_logger("sourcebridge.codec")


def encode_source(source: Source, options: PipelineOptions) -> CloudSource:
    blob = serialize_source(source)
    spec: dict[str, Any] = {
        OBJECT_TYPE_KEY: SOURCE_FORMAT_TYPE,
        SERIALIZED_SOURCE: base64.b64encode(blob).decode("ascii"),
    }

    metadata = SourceMetadata(produces_sorted_keys=source.produces_sorted_keys(options))
    try:
        metadata.estimated_size_bytes = source.get_estimated_size_bytes(options)
    except Exception:
        logger.warning("Size estimation of the source failed: %r", source, exc_info=True)

    return CloudSource(spec=spec, metadata=metadata)


def decode_source(spec: Mapping[str, Any]) -> Source:
    encoded = spec.get(SERIALIZED_SOURCE)
    if not isinstance(encoded, str) or not encoded:
        raise SourceDecodeError(f"Source spec is missing '{SERIALIZED_SOURCE}'")
    try:
        blob = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SourceDecodeError(f"'{SERIALIZED_SOURCE}' is not valid base64: {exc}") from exc

    source = deserialize_source(blob)
    try:
        source.validate()
    except Exception as exc:
        logger.error("Invalid source: %r", source, exc_info=True)
        raise InvalidSourceError(f"Invalid source: {source!r}") from exc
    return source


def decode_cloud_source(cloud_source: CloudSource | Mapping[str, Any]) -> Source:
    if isinstance(cloud_source, CloudSource):
        return decode_source(cloud_source.spec)
    return decode_source(CloudSource.from_dict(dict(cloud_source)).spec)
