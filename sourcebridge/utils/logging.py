"""Logging setup and compact debug lines for the source bridge.

Bridge loggers live under the ``sourcebridge`` namespace. Third-party loggers
stay at WARNING no matter how verbose the bridge is configured.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from typing import Any

from rich.logging import RichHandler

from sourcebridge.constants import DEFAULT_LOG_LEVEL, ENV_LOG_LEVEL
from sourcebridge.errors import ConfigError

LOGGER_NAMESPACE = "sourcebridge"
LOG_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DEBUG_LINE_LIMIT = 240


def resolve_log_level(level: int | str | None = None, default: str = DEFAULT_LOG_LEVEL) -> int:
    """Numeric level: explicit ``level``, else ``SOURCEBRIDGE_LOG_LEVEL``, else ``default``."""
    if isinstance(level, int):
        return level
    name = (level or os.getenv(ENV_LOG_LEVEL, "") or default).strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ConfigError(f"Unknown log level: {name}")
    return numeric


def setup_logging(level: int | str | None = None, *, default: str = DEFAULT_LOG_LEVEL) -> int:
    """Install one RichHandler on the root logger and return the bridge's level.

    Calling it again replaces the previous RichHandler; other root handlers
    are left in place.
    """
    target = resolve_log_level(level, default)

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, RichHandler)]:
        root.removeHandler(existing)
    handler = RichHandler(
        level=target,
        markup=False,
        rich_tracebacks=False,
        show_path=False,
        log_time_format=LOG_TIME_FORMAT,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(max(target, logging.WARNING))

    logging.getLogger(LOGGER_NAMESPACE).setLevel(target)
    return target


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def describe_source(source: Any) -> str:
    """Render a source as ``type_name{spec}``, falling back to ``repr``."""
    type_name = getattr(type(source), "type_name", "")
    to_spec = getattr(source, "to_spec", None)
    if not type_name or not callable(to_spec):
        return repr(source)
    try:
        spec = json.dumps(to_spec(), ensure_ascii=True, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError):
        return repr(source)
    return f"{type_name}{spec}"


def _format_field(value: Any) -> str:
    if callable(getattr(value, "to_spec", None)):
        return describe_source(value)
    if isinstance(value, float):
        return f"{value:.4f}"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=True)
    if isinstance(value, Mapping):
        try:
            return json.dumps(value, ensure_ascii=True, sort_keys=True)
        except (TypeError, ValueError):
            return f"mapping({len(value)})"
    if isinstance(value, (list, tuple)):
        return f"{type(value).__name__}({len(value)})"
    return str(value)


def debug_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    """Log ``event=<name> key=value ...`` at DEBUG; ``None`` fields are dropped.

    Source values are rendered through ``describe_source``. Lines longer than
    ``DEBUG_LINE_LIMIT`` are clipped.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    parts = [f"event={event}"]
    for key, value in fields.items():
        if value is not None:
            parts.append(f"{key}={_format_field(value)}")
    line = " ".join(parts)
    if len(line) > DEBUG_LINE_LIMIT:
        line = line[:DEBUG_LINE_LIMIT] + "..."
    logger.debug(line)
