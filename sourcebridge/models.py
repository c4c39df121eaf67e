from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ExecutionContext:
    """Engine-supplied context for a reading session."""

    step_name: str | None = None
    work_item_id: str | None = None
    state: dict[str, Any] = field(default_factory=dict)
