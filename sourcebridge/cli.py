from __future__ import annotations

import argparse
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.panel import Panel

from sourcebridge.codec import encode_source
from sourcebridge.config import BridgeConfig, load_config
from sourcebridge.errors import SourceBridgeError, SourceDecodeError
from sourcebridge.internal.events import EventBus
from sourcebridge.internal.operation_events import TOPIC_OPERATION_PREFIX
from sourcebridge.operations.dispatch import SerializedSourceFormat
from sourcebridge.reader import create_reader
from sourcebridge.sources.registry import load_source_plugins, resolve_source_type
from sourcebridge.utils.display.terminal import (
    print_cloud_source,
    print_elements,
    print_internal_events,
    print_json,
    print_operation_response,
)
from sourcebridge.utils.logging import get_logger, setup_logging

logger = get_logger("sourcebridge.cli")


def _load_document(path: Path) -> dict[str, Any]:
    # YAML is a superset of JSON, so either format is accepted.
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise SourceBridgeError(f"Expected a mapping in {path}")
    return raw


def _cmd_encode(args: argparse.Namespace, config: BridgeConfig) -> int:
    source_cls = resolve_source_type(args.type)
    spec = json.loads(args.spec)
    try:
        source = source_cls.from_spec(spec)
    except (TypeError, ValueError) as exc:
        raise SourceDecodeError(f"Invalid spec for source type {args.type}: {exc}") from exc
    source.validate()
    cloud_source = encode_source(source, config.pipeline)
    if args.json:
        print_json(cloud_source.to_dict())
    else:
        print_cloud_source(cloud_source)
    return 0


def _cmd_operate(args: argparse.Namespace, config: BridgeConfig) -> int:
    request = _load_document(Path(args.request))
    bus = EventBus()
    source_format = SerializedSourceFormat(config=config, event_bus=bus)
    response = source_format.perform_source_operation(request)
    if args.json:
        print_json(response.to_dict())
        return 0
    print_operation_response(response)
    if args.events:
        print_internal_events(bus.recent(topic_prefix=TOPIC_OPERATION_PREFIX))
    return 0


def _cmd_read(args: argparse.Namespace, config: BridgeConfig) -> int:
    document = _load_document(Path(args.descriptor))
    # Accept either a full encoded source or its bare spec.
    spec = document.get("spec", document)
    reader = create_reader(config.pipeline, spec)

    elements: list[Any] = []
    with reader.iterator() as iterator:
        while iterator.has_next():
            if args.limit is not None and len(elements) >= args.limit:
                break
            elements.append(iterator.next())

    if args.json:
        print_json(elements)
    else:
        print_elements(elements)
    return 0


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serialized source bridge tooling")
    parser.add_argument("--config", default="sourcebridge.yaml", help="Config path")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    encode = sub.add_parser("encode", help="Encode a source descriptor")
    encode.add_argument("type", help="Source type tag (e.g. range) or module.path:Class")
    encode.add_argument("spec", help="Source spec as a JSON object")
    encode.set_defaults(handler=_cmd_encode)

    operate = sub.add_parser("operate", help="Execute a source operation request file")
    operate.add_argument("request", help="JSON or YAML operation request")
    operate.add_argument("--events", action="store_true", help="Show internal events")
    operate.set_defaults(handler=_cmd_operate)

    read = sub.add_parser("read", help="Read elements from an encoded source file")
    read.add_argument("descriptor", help="JSON or YAML encoded source")
    read.add_argument("--limit", type=int, default=None, help="Stop after N elements")
    read.set_defaults(handler=_cmd_read)

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    config = load_config(args.config)
    setup_logging(args.log_level, default=config.logging.level)
    load_source_plugins(config.sources.plugins)

    try:
        return args.handler(args, config)
    except (SourceBridgeError, OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        if args.json:
            print_json({"command": args.command, "error": str(exc)})
        else:
            Console().print(Panel(str(exc), title="Source Bridge Error", border_style="red"))
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
