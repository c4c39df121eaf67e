"""Terminal rendering for source descriptors and operation responses."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from sourcebridge.api_objects.types import (
    CloudSource,
    SourceGetMetadataResponse,
    SourceMetadata,
    SourceOperationResponse,
    SourceSplitResponse,
)
from sourcebridge.internal.events import InternalEvent


def _metadata_line(metadata: SourceMetadata | None) -> str:
    if metadata is None:
        return "metadata=-"
    size = metadata.estimated_size_bytes
    return (
        f"sorted={metadata.produces_sorted_keys} | "
        f"estimated_size_bytes={size if size is not None else '-'}"
    )


def print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=True, indent=2))


def print_cloud_source(cloud_source: CloudSource, console: Console | None = None) -> None:
    console = console or Console()
    summary = _metadata_line(cloud_source.metadata)
    console.print(Panel(summary, title="Encoded Source", border_style="cyan"))
    console.print(json.dumps(cloud_source.to_dict(), ensure_ascii=True, indent=2), markup=False)


def print_operation_response(
    response: SourceOperationResponse,
    console: Console | None = None,
) -> None:
    console = console or Console()
    payload = response.payload

    if isinstance(payload, SourceGetMetadataResponse):
        summary = _metadata_line(payload.metadata)
        console.print(Panel(summary, title="Source Metadata", border_style="cyan"))
        return

    if isinstance(payload, SourceSplitResponse):
        console.print(
            Panel(
                f"outcome={payload.outcome} | shards={len(payload.shards)}",
                title="Split Complete",
                border_style="cyan",
            )
        )
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right")
        table.add_column("Derivation")
        table.add_column("Sorted")
        table.add_column("Est. Bytes", justify="right")
        table.add_column("No Further Split")
        for index, shard in enumerate(payload.shards):
            metadata = shard.source.metadata or SourceMetadata()
            size = metadata.estimated_size_bytes
            table.add_row(
                str(index),
                shard.derivation_mode,
                str(metadata.produces_sorted_keys),
                str(size) if size is not None else "-",
                str(bool(shard.source.does_not_need_splitting)),
            )
        console.print(table)


def print_elements(elements: list[Any], console: Console | None = None) -> None:
    console = console or Console()
    table = Table(title=f"Elements ({len(elements)})", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Value", overflow="fold")
    for index, element in enumerate(elements):
        table.add_row(str(index), json.dumps(element, ensure_ascii=True, default=str))
    console.print(table)


def print_internal_events(events: list[InternalEvent], console: Console | None = None) -> None:
    if not events:
        return

    console = console or Console()
    table = Table(title="Recent Internal Events", show_header=True, header_style="bold cyan")
    table.add_column("Time")
    table.add_column("Topic")
    table.add_column("Payload", overflow="fold")
    for event in events:
        table.add_row(
            event.ts.isoformat(timespec="seconds"),
            event.topic,
            json.dumps(event.payload, ensure_ascii=True, sort_keys=True),
        )
    console.print(table)
