"""
Domain models for comment-sync.

Defines the Comment record decoded from one API page and written as one row
of the `comments` table (see `db/init.sql`).
"""
from __future__ import annotations

from typing import Any, Tuple

from pydantic import BaseModel, Field

COMMENT_COLUMNS: Tuple[str, ...] = ("post_id", "id", "name", "email", "body")


class Comment(BaseModel):
    """
    Representation of a single comment from the upstream API.
    """

    post_id: int = Field(..., alias="postId", description="Owning post identifier.")
    id: int = Field(..., description="External identifier, used as the row primary key.")
    name: str = Field(..., description="Display name.")
    email: str = Field(..., description="Author email.")
    body: str = Field(..., description="Comment text.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    def as_row(self) -> Tuple[Any, ...]:
        """Return the values in COMMENT_COLUMNS order."""
        return (self.post_id, self.id, self.name, self.email, self.body)


__all__ = ["COMMENT_COLUMNS", "Comment"]
