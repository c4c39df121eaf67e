from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from sourcebridge.errors import ConfigError
from sourcebridge.sources.range import RangeSource
from sourcebridge.utils.logging import (
    DEBUG_LINE_LIMIT,
    debug_event,
    describe_source,
    resolve_log_level,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    bridge_level = logging.getLogger("sourcebridge").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("sourcebridge").setLevel(bridge_level)


def test_resolve_log_level_precedence(monkeypatch) -> None:
    monkeypatch.delenv("SOURCEBRIDGE_LOG_LEVEL", raising=False)
    assert resolve_log_level(None) == logging.INFO
    assert resolve_log_level(None, default="error") == logging.ERROR

    monkeypatch.setenv("SOURCEBRIDGE_LOG_LEVEL", "debug")
    assert resolve_log_level(None, default="error") == logging.DEBUG
    assert resolve_log_level("warning") == logging.WARNING
    assert resolve_log_level(15) == 15
    assert resolve_log_level("25") == 25

    with pytest.raises(ConfigError):
        resolve_log_level("chatty")


def test_setup_logging_replaces_its_handler(restore_root_logger) -> None:
    assert setup_logging("DEBUG") == logging.DEBUG
    assert setup_logging("INFO") == logging.INFO

    root = logging.getLogger()
    rich_handlers = [h for h in root.handlers if isinstance(h, RichHandler)]
    assert len(rich_handlers) == 1
    assert rich_handlers[0].level == logging.INFO
    assert root.level == logging.WARNING
    assert logging.getLogger("sourcebridge").level == logging.INFO


def test_debug_event_renders_sources_by_type_and_fields(caplog) -> None:
    logger = logging.getLogger("sourcebridge.tests.debug")

    with caplog.at_level(logging.DEBUG, logger="sourcebridge.tests.debug"):
        debug_event(logger, "split_started", source=RangeSource(0, 3), bundle_size=8, note=None)

    assert caplog.messages == [
        'event=split_started source=range{"element_size_bytes":8,"end":3,"start":0} bundle_size=8'
    ]


def test_debug_event_clips_long_lines(caplog) -> None:
    logger = logging.getLogger("sourcebridge.tests.debug")

    with caplog.at_level(logging.DEBUG, logger="sourcebridge.tests.debug"):
        debug_event(logger, "long", text="x" * (DEBUG_LINE_LIMIT * 2))

    assert len(caplog.messages[0]) == DEBUG_LINE_LIMIT + 3
    assert caplog.messages[0].endswith("...")


def test_describe_source_falls_back_to_repr() -> None:
    assert describe_source(RangeSource(1, 2)) == (
        'range{"element_size_bytes":8,"end":2,"start":1}'
    )
    assert describe_source(object).startswith("<class")
