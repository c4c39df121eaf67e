from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import pytest

from sourcebridge.api_objects.types import SourceGetMetadataRequest
from sourcebridge.codec import encode_source
from sourcebridge.config import PipelineOptions
from sourcebridge.operations.metadata import perform_get_metadata, source_metadata
from sourcebridge.sources.collection import ListSource
from sourcebridge.sources.range import RangeSource
from sourcebridge.sources.registry import register_source


@register_source
@dataclass(slots=True, frozen=True)
class FlakySizeSource(RangeSource):
    type_name: ClassVar[str] = "test_flaky_size"

    def get_estimated_size_bytes(self, options: PipelineOptions) -> int:
        raise RuntimeError("estimator down")


def test_metadata_is_reported_verbatim() -> None:
    options = PipelineOptions()
    request = SourceGetMetadataRequest(
        source=encode_source(ListSource(elements=["ab", "c"], sorted_keys=True), options)
    )

    response = perform_get_metadata(request, options)

    assert response.metadata.produces_sorted_keys is True
    assert response.metadata.estimated_size_bytes == 7


def test_metadata_estimation_failure_is_hard() -> None:
    options = PipelineOptions()
    # Encoding tolerates the failure; the metadata operation does not.
    request = SourceGetMetadataRequest(source=encode_source(FlakySizeSource(0, 3), options))

    with pytest.raises(RuntimeError, match="estimator down"):
        perform_get_metadata(request, options)


def test_source_metadata_for_range() -> None:
    metadata = source_metadata(RangeSource(0, 10, element_size_bytes=4), PipelineOptions())
    assert metadata.produces_sorted_keys is False
    assert metadata.estimated_size_bytes == 40
