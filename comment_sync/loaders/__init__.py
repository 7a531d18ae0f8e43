"""
Loaders package for comment-sync.
"""

from comment_sync.loaders.batch_loader import BatchLoader, build_insert

__all__ = ["BatchLoader", "build_insert"]
