"""
comment-sync - batch ETL from a paginated JSON API into PostgreSQL.

Pages through the upstream `/comments` endpoint with `_start`/`_limit`
parameters and writes each page into the `comments` table with one
transactional multi-row INSERT. Two pagination policies are available:

- open_ended: pages of 50 until an empty page, with a 1s pause between pages
- fixed_count: exactly 5 pages of 100, no empty-page stop and no pause

Any failure aborts the run; batches committed before it stay in place.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from comment_sync.config import Settings, build_dsn, get_settings, load_settings
from comment_sync.domain.models import COMMENT_COLUMNS, Comment
from comment_sync.errors import SyncError
from comment_sync.orchestrator import available_policies, run_sync
from comment_sync.policies.abstract import (
    AbstractPaginationPolicy,
    PaginationPolicy,
    SyncResult,
)
from comment_sync.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "build_dsn",
    "get_settings",
    "load_settings",
    # Domain
    "COMMENT_COLUMNS",
    "Comment",
    # Errors
    "SyncError",
    # Orchestration
    "available_policies",
    "run_sync",
    # Policy abstractions
    "AbstractPaginationPolicy",
    "PaginationPolicy",
    "SyncResult",
    # Logging
    "configure_logging",
    "get_logger",
]
