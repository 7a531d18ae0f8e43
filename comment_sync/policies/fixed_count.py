from __future__ import annotations

from comment_sync.policies.abstract import (
    AbstractPaginationPolicy,
    BatchSink,
    BatchSummary,
    PageSource,
    SyncResult,
)
from comment_sync.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_PAGES = 5
DEFAULT_PAGE_SIZE = 100


class FixedCountPolicy(AbstractPaginationPolicy):
    """
    Fetch exactly `pages` pages at offsets `i * page_size`, with no pause.

    There is no empty-page termination: every cycle fetches, even when the
    upstream collection is exhausted. A cycle loads only when its page has
    records. An empty page is a fetch-only cycle recorded as a zero-record
    batch: the loader is skipped and no transaction is opened, since an
    INSERT with no value tuples cannot be built. "Five cycles" therefore
    means five fetches and at most five loads.
    """

    name: str = "fixed_count"
    description: str = "N pages at offsets i*page_size; no empty-page stop, no pause."

    def __init__(self, pages: int = DEFAULT_PAGES, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        super().__init__(page_size)
        if pages < 0:
            raise ValueError(f"pages must be non-negative, got {pages}")
        self.pages = pages

    def execute(self, source: PageSource, sink: BatchSink) -> SyncResult:
        result = self._new_result()

        for i in range(self.pages):
            offset = i * self.page_size
            records = source.fetch_records(offset, self.page_size)
            result["pages"] += 1

            if records:
                written = sink.load(records, offset)
            else:
                log.warning(f"Empty page at offset {offset}; continuing", extra={"offset": offset})
                written = 0

            result["records"] += written
            result["batches"].append(BatchSummary(offset=offset, records=written))

        return result


__all__ = ["FixedCountPolicy"]
