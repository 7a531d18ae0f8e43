"""
Open-ended policy: page until the API returns an empty page.

Start at offset 0, fetch fixed-size pages, load each non-empty page, advance
the offset by the page size and pause between pages. A short page does not
end the run; only an empty one does.
"""

from __future__ import annotations

import time
from typing import Callable

from comment_sync.policies.abstract import (
    AbstractPaginationPolicy,
    BatchSink,
    BatchSummary,
    PageSource,
    SyncResult,
)
from comment_sync.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50
DEFAULT_DELAY_SECONDS = 1.0


class OpenEndedPolicy(AbstractPaginationPolicy):
    """
    Loop until an empty page, sleeping between pages to spare the upstream API.
    """

    name: str = "open_ended"
    description: str = "Fixed-size pages from offset 0 until an empty page, pausing between pages."

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(page_size)
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def execute(self, source: PageSource, sink: BatchSink) -> SyncResult:
        result = self._new_result()
        offset = 0

        while True:
            records = source.fetch_records(offset, self.page_size)
            result["pages"] += 1

            if not records:
                log.info("No more comments to process. Exiting loop.", extra={"offset": offset})
                result["stopped_on_empty"] = True
                break

            written = sink.load(records, offset)
            result["records"] += written
            result["batches"].append(BatchSummary(offset=offset, records=written))

            offset += self.page_size
            if self.delay_seconds > 0:
                self._sleep(self.delay_seconds)

        return result


__all__ = ["OpenEndedPolicy"]
