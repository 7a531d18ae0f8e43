"""
Domain package for comment-sync.

Exports the record model shared by the fetcher, loader and policies.
"""

from comment_sync.domain.models import COMMENT_COLUMNS, Comment

__all__ = [
    "COMMENT_COLUMNS",
    "Comment",
]
