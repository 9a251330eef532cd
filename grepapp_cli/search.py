"""Paginated search driver."""

from __future__ import annotations

import logging
import time
from typing import Callable

from .grepapp import GrepAppClient
from .types import ResultSet, SearchQuery

logger = logging.getLogger(__name__)

DEFAULT_PAGE_CAP = 100
DEFAULT_DELAY = 1.0
# Results returned per page by grep.app.
PAGE_SIZE = 10


def run_search(
    client: GrepAppClient,
    query: SearchQuery,
    *,
    page_cap: int = DEFAULT_PAGE_CAP,
    delay: float = DEFAULT_DELAY,
    stop_when_exhausted: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> ResultSet:
    """Fetch pages 1..``page_cap`` and merge them into one result set.

    Any error raised by the client aborts the run; nothing fetched so far
    is returned in that case.
    """
    results = ResultSet()
    page = 1
    while page != 0 and page <= page_cap:
        sleep(delay)
        page_hits, total = client.fetch_page(page, query)
        added = results.merge(page_hits)
        logger.debug(
            "page %d merged: %d new files, %d files so far", page, len(added), len(results)
        )
        if stop_when_exhausted and not added and page * PAGE_SIZE >= total:
            logger.info("no new files after page %d of %d matches, stopping", page, total)
            break
        page += 1
    return results
