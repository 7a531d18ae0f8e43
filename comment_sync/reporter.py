from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from comment_sync.policies.abstract import SyncResult


def print_summary(result: SyncResult, console: Optional[Console] = None) -> None:
    """
    Render a sync result as a rich table, one row per batch plus totals.
    """
    console = console or Console()

    batches = result.get("batches", [])
    if not batches:
        console.print("[yellow]No comments were loaded.[/yellow]")
        return

    duration = result.get("duration_seconds", 0.0)
    throughput = result.get("throughput_records_per_sec", 0.0)
    mem_bytes = result.get("peak_rss_bytes") or 0

    table = Table(
        title=f"Comment Sync Results ({result.get('policy', 'unknown')})",
        box=box.ROUNDED,
        caption=(
            f"{duration:.1f}s │ {throughput:,.2f} comments/s │ "
            f"peak memory {mem_bytes / (1024 * 1024):.2f} MB"
        ),
    )
    table.add_column("Batch", justify="right", style="cyan", no_wrap=True)
    table.add_column("Offset", justify="right", style="blue")
    table.add_column("Comments", justify="right", style="magenta")

    for index, batch in enumerate(batches, start=1):
        table.add_row(str(index), f"{batch['offset']:,}", f"{batch['records']:,}")

    table.add_section()
    table.add_row(
        "Total",
        f"{result.get('pages', 0)} pages",
        f"{result.get('records', 0):,}",
        style="bold green",
    )

    console.print(table)


__all__ = ["print_summary"]
