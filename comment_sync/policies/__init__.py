"""
Policies package for comment-sync.

Re-exports the policy interfaces and the two concrete pagination loops so
downstream code can import from `comment_sync.policies` directly.
"""

from comment_sync.policies.abstract import (
    AbstractPaginationPolicy,
    BatchSink,
    BatchSummary,
    PageSource,
    PaginationPolicy,
    SyncResult,
)
from comment_sync.policies.fixed_count import FixedCountPolicy
from comment_sync.policies.open_ended import OpenEndedPolicy

__all__ = [
    # Abstracts
    "AbstractPaginationPolicy",
    "BatchSink",
    "BatchSummary",
    "PageSource",
    "PaginationPolicy",
    "SyncResult",
    # Concrete policies
    "FixedCountPolicy",
    "OpenEndedPolicy",
]
