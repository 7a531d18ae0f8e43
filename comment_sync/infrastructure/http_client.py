"""
Page fetcher for the upstream comments API.

One GET per page with `_start`/`_limit` query parameters. Anything other than
a 200 response carrying a JSON array of comments is an error; there is no
retry.
"""

from __future__ import annotations

from typing import Dict, List

import httpx
from pydantic import TypeAdapter, ValidationError

from comment_sync.config import API_BASE_URL, HTTP_TIMEOUT_SECONDS
from comment_sync.domain.models import Comment
from comment_sync.errors import DecodeError, HttpStatusError, TransportError
from comment_sync.utils.logging import get_logger

log = get_logger(__name__)

COMMENTS_PATH = "/comments"

_page_adapter = TypeAdapter(List[Comment])


def build_page_params(offset: int, limit: int) -> Dict[str, int]:
    """Query parameters selecting one page."""
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")
    if offset < 0:
        raise ValueError(f"offset must be non-negative, got {offset}")
    return {"_start": offset, "_limit": limit}


def decode_page(raw: bytes, offset: int = 0) -> List[Comment]:
    """
    Validate a response body as a JSON array of comments.

    Raises
    ------
    DecodeError
        If the body is not valid JSON or an element is not Comment-shaped.
    """
    try:
        return _page_adapter.validate_json(raw)
    except ValidationError as exc:
        raise DecodeError(
            "Error decoding JSON response",
            context={"offset": offset, "errors": exc.error_count()},
            original_exception=exc,
        ) from exc


def open_client(timeout: float = HTTP_TIMEOUT_SECONDS) -> httpx.Client:
    """Create the HTTP client used for a whole run; callers close it with `with`."""
    return httpx.Client(timeout=timeout)


class PageFetcher:
    """
    Fetch pages of comments from `<base_url>/comments`.

    The client is owned by the caller, which is responsible for closing it.
    """

    def __init__(self, client: httpx.Client, base_url: str = API_BASE_URL) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")

    @property
    def url(self) -> str:
        return f"{self.base_url}{COMMENTS_PATH}"

    def fetch_page(self, offset: int, limit: int) -> bytes:
        """
        Issue one GET for the page and return the raw body.

        Raises
        ------
        TransportError
            If the request fails before a response arrives.
        DecodeError
            If the body cannot be decompressed per its Content-Encoding.
        HttpStatusError
            If the response status is not 200.
        """
        params = build_page_params(offset, limit)
        try:
            response = self._client.get(self.url, params=params)
        except httpx.DecodingError as exc:
            raise DecodeError(
                "Error decoding response body",
                context={"url": self.url, "offset": offset, "limit": limit},
                original_exception=exc,
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                "Error fetching data from API",
                context={"url": self.url, "offset": offset, "limit": limit},
                original_exception=exc,
            ) from exc

        if response.status_code != httpx.codes.OK:
            raise HttpStatusError(
                f"Unexpected status code: {response.status_code}",
                context={
                    "url": str(response.request.url),
                    "offset": offset,
                    "limit": limit,
                    "status_code": response.status_code,
                },
            )
        return response.content

    def fetch_records(self, offset: int, limit: int) -> List[Comment]:
        """Fetch and decode one page."""
        raw = self.fetch_page(offset, limit)
        records = decode_page(raw, offset=offset)
        log.debug(f"Fetched {len(records)} comments at offset {offset}")
        return records


__all__ = ["COMMENTS_PATH", "PageFetcher", "build_page_params", "decode_page", "open_client"]
