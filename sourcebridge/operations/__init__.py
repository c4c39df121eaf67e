"""Remote source operations: metadata, split, and their dispatcher."""

from sourcebridge.operations.dispatch import SerializedSourceFormat
from sourcebridge.operations.metadata import perform_get_metadata, source_metadata
from sourcebridge.operations.split import effective_bundle_size, perform_split, split_source

__all__ = [
    "SerializedSourceFormat",
    "effective_bundle_size",
    "perform_get_metadata",
    "perform_split",
    "source_metadata",
    "split_source",
]
