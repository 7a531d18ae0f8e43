"""
Profiling utilities for comment-sync.

A context manager measuring wall-clock time (perf_counter) plus RSS and CPU
snapshots (psutil) around a sync run, for the end-of-run summary. Sampling
is done at the block boundaries only; nothing runs in the background.

Usage:
    from comment_sync.utils.profiler import profile_block

    with profile_block("open_ended") as stats:
        run_policy()

    print(stats.duration_seconds, stats.peak_rss_bytes)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for profiling measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)


@contextlib.contextmanager
def profile_block(label: str) -> Generator[ProfileStats, None, None]:
    """
    Context manager to profile a block of code.

    Stats are filled in when the block exits, including when it raises.

    Parameters
    ----------
    label : str
        Human-friendly label for the profiled block.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()
    # CPU percent needs a priming call
    process.cpu_percent(interval=None)
    start_rss = process.memory_info().rss

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts
        stats.peak_rss_bytes = max(start_rss, process.memory_info().rss)
        stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]
