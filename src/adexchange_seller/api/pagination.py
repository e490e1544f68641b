"""Continuation-token pagination over list calls.

The loop ends only when a page comes back without a token. A page may
be empty and still carry a token, in which case the next page is
fetched anyway; the server does not promise that a token means more
items.
"""

import logging
from typing import AsyncIterator, Awaitable, Callable, Optional, TypeVar

from ..models.base_models import ResourceCollection
from ..models.options import ListOptions

logger = logging.getLogger(__name__)

PageT = TypeVar("PageT", bound=ResourceCollection)
OptionsT = TypeVar("OptionsT", bound=ListOptions)


async def iter_pages(
    fetch: Callable[[OptionsT], Awaitable[PageT]],
    options: OptionsT,
    max_pages: Optional[int] = None,
) -> AsyncIterator[PageT]:
    """Yield successive pages until the server stops returning a token.

    :param fetch: Coroutine function fetching one page for given options
    :param options: Options of the first page; ``page_token`` may resume
    :param max_pages: Optional cap on the number of pages fetched
    """
    fetched = 0
    while True:
        page = await fetch(options)
        fetched += 1
        yield page
        if not page.next_page_token:
            logger.debug("Pagination finished after %d page(s)", fetched)
            return
        if max_pages is not None and fetched >= max_pages:
            logger.debug("Stopping pagination at max_pages=%d", max_pages)
            return
        options = options.with_page_token(page.next_page_token)


async def iter_items(
    fetch: Callable[[OptionsT], Awaitable[PageT]],
    options: OptionsT,
    max_pages: Optional[int] = None,
) -> AsyncIterator:
    """Yield every item of every page, in server order."""
    async for page in iter_pages(fetch, options, max_pages=max_pages):
        for item in page.items:
            yield item
