"""
Orchestrator for a comment sync run.

Opens the database connection and the HTTP client, resolves the pagination
policy, runs it under a profiler block and returns the enriched result.

Usage (example from CLI):
    from comment_sync.orchestrator import run_sync

    result = run_sync("open_ended", settings)
    print(result["records"])

Errors are not handled here: they propagate as SyncError after both `with`
blocks have released their resources.
"""

from __future__ import annotations

from typing import Callable, ContextManager, Dict, List, Optional

import httpx
from psycopg import Connection

from comment_sync.config import API_BASE_URL, Settings, load_settings
from comment_sync.infrastructure.db_factory import connect
from comment_sync.infrastructure.http_client import PageFetcher, open_client
from comment_sync.loaders.batch_loader import BatchLoader
from comment_sync.policies.abstract import PaginationPolicy, SyncResult
from comment_sync.policies.fixed_count import FixedCountPolicy
from comment_sync.policies.open_ended import OpenEndedPolicy
from comment_sync.utils.logging import get_logger
from comment_sync.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)

DEFAULT_POLICY = "open_ended"


def _round_float(value: float, decimals: int = 2) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def _policy_factories() -> Dict[str, Callable[[], PaginationPolicy]]:
    """Registry of available policies."""
    return {
        "open_ended": lambda: OpenEndedPolicy(),
        "fixed_count": lambda: FixedCountPolicy(),
    }


def available_policies() -> List[str]:
    """List available policy names."""
    return sorted(_policy_factories().keys())


def _resolve_policy(name: str) -> PaginationPolicy:
    factories = _policy_factories()
    if name not in factories:
        raise ValueError(f"Unknown policy '{name}'. Available: {', '.join(sorted(factories))}")
    return factories[name]()


def _merge_result(result: SyncResult, stats: ProfileStats) -> SyncResult:
    """Attach profiler stats to the policy result."""
    merged = SyncResult(**result)
    merged["duration_seconds"] = _round_float(stats.duration_seconds)
    merged["throughput_records_per_sec"] = (
        _round_float(merged.get("records", 0) / stats.duration_seconds)
        if stats.duration_seconds > 0
        else 0.0
    )
    merged["peak_rss_bytes"] = stats.peak_rss_bytes
    return merged


def run_sync(
    policy_name: str = DEFAULT_POLICY,
    settings: Optional[Settings] = None,
    base_url: str = API_BASE_URL,
    dsn_override: Optional[str] = None,
    policy: Optional[PaginationPolicy] = None,
    client_factory: Callable[[], httpx.Client] = open_client,
    connection_factory: Optional[Callable[..., ContextManager[Connection]]] = None,
) -> SyncResult:
    """
    Run one sync with the named policy.

    Parameters
    ----------
    policy_name : str
        Registered policy to run (see `available_policies`).
    settings : Settings | None
        Database credentials; loaded from the environment when omitted.
    base_url : str
        Upstream API root; `/comments` is appended.
    dsn_override : str | None
        Connect with this DSN instead of the one built from settings.
    policy : PaginationPolicy | None
        Pre-built policy instance; bypasses the registry when given.
    client_factory, connection_factory
        Seams for tests; default to the real httpx client and psycopg connector.

    Returns
    -------
    SyncResult
        Policy summary with duration, throughput and peak RSS attached.
    """
    active = policy or _resolve_policy(policy_name)
    if settings is None:
        settings = load_settings()
    open_connection = connection_factory or connect

    log.info(
        f"[SYNC START] {active.name}: {active.description}",
        extra={"policy": active.name, "base_url": base_url},
    )

    with open_connection(settings, dsn_override=dsn_override) as conn:
        with client_factory() as client:
            fetcher = PageFetcher(client, base_url=base_url)
            loader = BatchLoader(conn)
            with profile_block(active.name) as stats:
                result = active.execute(fetcher, loader)

    merged = _merge_result(result, stats)
    log.info(
        f"[SYNC COMPLETE] {active.name}: {merged['records']} comments in {merged['pages']} pages",
        extra={
            "policy": active.name,
            "records": merged["records"],
            "pages": merged["pages"],
            "duration": merged["duration_seconds"],
        },
    )
    return merged


__all__ = [
    "DEFAULT_POLICY",
    "available_policies",
    "run_sync",
]
