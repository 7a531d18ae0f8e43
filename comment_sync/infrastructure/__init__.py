"""
Infrastructure package for comment-sync.

Centralizes I/O concerns: the PostgreSQL connection and the HTTP page
fetcher. Keep this layer focused on resource management, decoupled from the
pagination policies.
"""

from comment_sync.infrastructure.db_factory import connect, ping
from comment_sync.infrastructure.http_client import (
    PageFetcher,
    build_page_params,
    decode_page,
    open_client,
)

__all__ = [
    "PageFetcher",
    "build_page_params",
    "connect",
    "decode_page",
    "open_client",
    "ping",
]
