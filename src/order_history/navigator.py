"""Page-by-page walk over the order listing.

The walk is a small state machine over pages ``1..total_pages``:

1. **Loaded(n)** -- extract every order element on the current page.
2. **Scraped(n)** -- if ``n == total_pages`` the walk ends.  Otherwise the
   "next page" control is located; if present it is clicked and the page
   waits for readiness before moving to ``Loaded(n + 1)``.
3. **Terminated** -- reached after the last page, or early when the "next"
   control is missing.  An early end is reported on the result's
   ``terminated_early`` flag (and logged), never silently.

Pages are strictly sequential: each click mutates the one shared page, so
there is nothing to parallelise.
"""

from __future__ import annotations

import logging
import time

from order_history.browser import ElementLike, PageLike
from order_history.console import success
from order_history.descriptors import OrderDescriptor
from order_history.extractor import extract_page
from order_history.models import PageWalkResult, PaginationConfig
from order_history.parsers import parse_page_count

logger = logging.getLogger(__name__)


def read_total_pages(page: ElementLike, descriptor: OrderDescriptor) -> int:
    """Read the total page count from the "last page" pagination control.

    Returns 1 if the control is absent or its text is not a page number.
    """
    control = page.locate(descriptor.last_page_selector) if descriptor.last_page_selector else None
    text = control.read_text() if control is not None else None
    return parse_page_count(text).value


def walk_pages(
    page: PageLike,
    descriptor: OrderDescriptor,
    pagination: PaginationConfig | None = None,
    total_pages: int | None = None,
) -> PageWalkResult:
    """Extract orders from every results page, starting at the current one.

    Args:
        page: Page positioned on the first results page.
        descriptor: Markup description used for extraction and pagination.
        pagination: Readiness wait settings.  Defaults to
            :class:`PaginationConfig` defaults.
        total_pages: Known page count.  Read from the page when omitted.

    Returns:
        A :class:`PageWalkResult` with every order in page-then-rendering
        order.
    """
    pagination = pagination or PaginationConfig()
    if total_pages is None:
        total_pages = read_total_pages(page, descriptor)

    started = time.perf_counter()
    result = PageWalkResult(total_pages=total_pages)

    current = 1
    while True:
        logger.info("Processing page %d/%d...", current, total_pages)
        page_orders = extract_page(page, descriptor)
        logger.info("Fetched %d orders from page %d.", len(page_orders), current)
        result.orders.extend(page_orders)
        result.pages_scraped = current

        if current >= total_pages:
            break

        next_control = page.locate(descriptor.next_page_selector)
        if next_control is None:
            logger.warning(
                "'Next' button not found on page %d of %d; stopping early.",
                current,
                total_pages,
            )
            result.terminated_early = True
            break

        logger.info("Clicking 'Next' to move to page %d...", current + 1)
        next_control.click()
        page.wait_until_ready(pagination)
        current += 1

    result.elapsed_seconds = time.perf_counter() - started
    if result.terminated_early:
        logger.warning(
            "Processed %d of %d pages in %.2f seconds.",
            result.pages_scraped,
            total_pages,
            result.elapsed_seconds,
        )
    else:
        success(logger, "All pages processed in %.2f seconds.", result.elapsed_seconds)
    return result
