"""Source contracts, the type registry, and built-in sources."""

from sourcebridge.sources.base import BaseReader, BaseSource, Source, SourceReader
from sourcebridge.sources.collection import ListSource
from sourcebridge.sources.range import RangeSource
from sourcebridge.sources.registry import (
    load_source_plugins,
    register_source,
    resolve_source_type,
)
from sourcebridge.sources.text import TextFileSource

__all__ = [
    "BaseReader",
    "BaseSource",
    "ListSource",
    "RangeSource",
    "Source",
    "SourceReader",
    "TextFileSource",
    "load_source_plugins",
    "register_source",
    "resolve_source_type",
]
