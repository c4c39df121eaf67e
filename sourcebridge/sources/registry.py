"""Source type registry used to serialize descriptors by type tag."""

from __future__ import annotations

import importlib
import json
from collections.abc import Iterable
from typing import Any

from sourcebridge.errors import SourceDecodeError, SourceEncodeError, SourcePluginError
from sourcebridge.sources.base import Source

SOURCE_TYPES: dict[str, type] = {}

# A class addressed by import path must at least decode and validate itself.
_REQUIRED_SOURCE_METHODS = ("from_spec", "to_spec", "validate", "create_reader")


def register_source(source_cls: type) -> type:
    """Register a source class under its ``type_name``. Usable as a decorator."""
    type_name = getattr(source_cls, "type_name", "")
    if not type_name:
        raise SourcePluginError(f"Source class {source_cls.__qualname__} has no type_name")
    existing = SOURCE_TYPES.get(type_name)
    if existing is not None and existing is not source_cls:
        raise SourcePluginError(
            f"Source type '{type_name}' already registered by {existing.__qualname__}"
        )
    SOURCE_TYPES[type_name] = source_cls
    return source_cls


def type_tag_for(source: Source) -> str:
    source_cls = type(source)
    type_name = getattr(source_cls, "type_name", "")
    if type_name and SOURCE_TYPES.get(type_name) is source_cls:
        return type_name
    # Unregistered classes are addressed by import path.
    return f"{source_cls.__module__}:{source_cls.__qualname__}"


def resolve_source_type(type_tag: str) -> type:
    source_cls = SOURCE_TYPES.get(type_tag)
    if source_cls is not None:
        return source_cls

    module_path, _, symbol = type_tag.partition(":")
    if not module_path or not symbol:
        raise SourceDecodeError(f"Unknown source type: {type_tag}")
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise SourceDecodeError(f"Cannot import source type {type_tag}: {exc}") from exc

    target: Any = module
    for part in symbol.split("."):
        target = getattr(target, part, None)
        if target is None:
            raise SourceDecodeError(f"Source type not found: {type_tag}")
    if not isinstance(target, type):
        raise SourceDecodeError(f"Source type {type_tag} is not a class")
    missing = [
        name for name in _REQUIRED_SOURCE_METHODS if not callable(getattr(target, name, None))
    ]
    if missing:
        raise SourceDecodeError(f"Class {type_tag} is not a source (missing {', '.join(missing)})")
    return target


def serialize_source(source: Source) -> bytes:
    type_tag = type_tag_for(source)
    if type_tag not in SOURCE_TYPES:
        # Refuse tags that decode could never turn back into this class.
        try:
            resolved = resolve_source_type(type_tag)
        except SourceDecodeError as exc:
            raise SourceEncodeError(
                f"Source class {type_tag} is neither registered nor importable: {exc}"
            ) from exc
        if resolved is not type(source):
            raise SourceEncodeError(f"Type tag {type_tag} resolves to {resolved!r}")
    try:
        payload = {"type": type_tag, "spec": source.to_spec()}
        return json.dumps(payload, ensure_ascii=True, sort_keys=True).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SourceEncodeError(f"Failed to serialize source {source!r}: {exc}") from exc


def deserialize_source(blob: bytes) -> Source:
    try:
        payload = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SourceDecodeError(f"Serialized source is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict) or "type" not in payload:
        raise SourceDecodeError("Serialized source is missing its type tag")

    source_cls = resolve_source_type(str(payload["type"]))
    spec = payload.get("spec") or {}
    if not isinstance(spec, dict):
        raise SourceDecodeError(f"Serialized source spec must be a mapping, got {type(spec)}")
    try:
        return source_cls.from_spec(spec)
    except (TypeError, ValueError, KeyError, AttributeError) as exc:
        raise SourceDecodeError(
            f"Failed to construct source {payload['type']} from spec: {exc}"
        ) from exc


def load_source_plugins(plugin_paths: Iterable[str]) -> None:
    """Import plugins given as ``module.path:function``; each is called with the registry."""
    for plugin_path in plugin_paths:
        module_path, _, symbol = plugin_path.partition(":")
        if not module_path or not symbol:
            raise SourcePluginError(
                f"Invalid plugin '{plugin_path}'. Expected format module.path:function_name"
            )

        module = importlib.import_module(module_path)
        factory = getattr(module, symbol, None)
        if factory is None:
            raise SourcePluginError(f"Plugin function not found: {plugin_path}")

        factory(register_source)
