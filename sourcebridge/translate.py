"""Step-graph helper for reading a source through the serialized format."""

from __future__ import annotations

from typing import Any

from sourcebridge.codec import encode_source
from sourcebridge.config import PipelineOptions
from sourcebridge.constants import (
    CUSTOM_SOURCE_FORMAT,
    FORMAT_PROPERTY,
    OUTPUT_PROPERTY,
    PARALLEL_READ_STEP,
    SOURCE_STEP_INPUT,
)
from sourcebridge.sources.base import Source


def translate_read_step(
    source: Source,
    options: PipelineOptions,
    step_name: str,
    output_name: str | None = None,
) -> dict[str, Any]:
    cloud_source = encode_source(source, options)
    return {
        "kind": PARALLEL_READ_STEP,
        "name": step_name,
        "properties": {
            FORMAT_PROPERTY: CUSTOM_SOURCE_FORMAT,
            SOURCE_STEP_INPUT: cloud_source.to_dict(),
            OUTPUT_PROPERTY: output_name or f"{step_name}.out",
        },
    }
