"""Cursor pagination over a database query."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from notion2obsidian.context import ImportContext
from notion2obsidian.models import QueryPage, Record

logger = logging.getLogger(__name__)

FetchPage = Callable[[str | None], Awaitable[QueryPage]]


async def iter_pages(fetch_page: FetchPage, context: ImportContext) -> AsyncIterator[QueryPage]:
    """
    Yield query pages one at a time until the cursor runs out.

    Cancellation is checked before every request; a request already sent is
    always awaited. Errors from fetch_page are not caught.
    """
    cursor: str | None = None
    pages = 0
    records = 0

    while not context.is_cancelled():
        page = await fetch_page(cursor)
        pages += 1
        records += len(page.results)
        context.status(f"Fetched {pages} pages ({records} records)...")

        yield page

        if not page.has_more or not page.next_cursor:
            break
        cursor = page.next_cursor

    logger.debug(f"Pagination finished after {pages} pages")


async def fetch_all_records(fetch_page: FetchPage, context: ImportContext) -> list[Record]:
    """Fetch every page and return all records in arrival order."""
    records: list[Record] = []
    async for page in iter_pages(fetch_page, context):
        records.extend(page.results)
    return records
