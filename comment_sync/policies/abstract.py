"""
Pagination policy interfaces and result contracts for comment-sync.

A policy drives the fetch -> load -> advance loop against a PageSource and a
BatchSink and returns a SyncResult describing what it did. Errors are not
caught here; they propagate to the orchestrator and the CLI.
"""

from __future__ import annotations

import abc
from typing import List, Optional, Protocol, Sequence, TypedDict, runtime_checkable

from comment_sync.domain.models import Comment


class BatchSummary(TypedDict):
    offset: int
    records: int


class SyncResult(TypedDict, total=False):
    """
    Summary of one run of a policy.

    The orchestrator enriches it with timing fields before reporting.
    """

    policy: str
    pages: int
    records: int
    batches: List[BatchSummary]
    stopped_on_empty: bool
    duration_seconds: float
    throughput_records_per_sec: float
    peak_rss_bytes: Optional[int]


class PageSource(Protocol):
    def fetch_records(self, offset: int, limit: int) -> List[Comment]: ...


class BatchSink(Protocol):
    def load(self, records: Sequence[Comment], offset: int) -> int: ...


@runtime_checkable
class PaginationPolicy(Protocol):
    """
    Common interface all pagination policies implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the loop's termination rule.
    """

    name: str
    description: str

    def execute(self, source: PageSource, sink: BatchSink) -> SyncResult:
        """
        Run the loop until the policy's stop condition and return a summary.
        """
        ...


class AbstractPaginationPolicy(abc.ABC):
    """
    ABC helper for class-based policies.

    Subclasses set `name`, `description` and `page_size` and implement `execute`.
    """

    name: str
    description: str
    page_size: int

    def __init__(self, page_size: int) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size

    def _new_result(self) -> SyncResult:
        return SyncResult(
            policy=self.name,
            pages=0,
            records=0,
            batches=[],
            stopped_on_empty=False,
        )

    @abc.abstractmethod
    def execute(self, source: PageSource, sink: BatchSink) -> SyncResult:  # pragma: no cover
        """Run the policy and return a summary."""
        raise NotImplementedError


__all__ = [
    "AbstractPaginationPolicy",
    "BatchSink",
    "BatchSummary",
    "PageSource",
    "PaginationPolicy",
    "SyncResult",
]
