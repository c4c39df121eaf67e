"""Bridge between splittable sources and the remote source operation protocol."""

from sourcebridge.api_objects import SourceOperationRequest, SourceOperationResponse
from sourcebridge.codec import decode_source, encode_source
from sourcebridge.config import BridgeConfig, PipelineOptions, load_config
from sourcebridge.constants import APP_NAME
from sourcebridge.operations import SerializedSourceFormat
from sourcebridge.reader import ReaderIterator, create_reader, read_all

__all__ = [
    "APP_NAME",
    "BridgeConfig",
    "PipelineOptions",
    "ReaderIterator",
    "SerializedSourceFormat",
    "SourceOperationRequest",
    "SourceOperationResponse",
    "__version__",
    "create_reader",
    "decode_source",
    "encode_source",
    "load_config",
    "read_all",
]
__version__ = "0.1.0"
