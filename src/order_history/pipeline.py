"""Session orchestration for Order History Extractor.

Runs one interactive extraction session:

1. **Launch** -- open a browser page.
2. **Home** -- navigate to the portal's home page.
3. **Login gate** -- block until the operator has logged in by hand.
4. **Orders** -- navigate to the order listing and read the page count.
5. **Walk** -- extract every results page (see :mod:`order_history.navigator`).
6. **Aggregate** -- group by status and compute the category sums.

Export and printing are left to the caller.  Faults raised by the browser
are not caught here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass, field

import click

from order_history.aggregator import summarize
from order_history.browser import PageLike, open_browser
from order_history.config import build_descriptor
from order_history.console import success
from order_history.models import (
    AppConfig,
    BrowserConfig,
    OrderSummary,
    PageWalkResult,
)
from order_history.navigator import read_total_pages, walk_pages

logger = logging.getLogger(__name__)

PageFactory = Callable[[BrowserConfig], AbstractContextManager[PageLike]]


@dataclass
class RunResult:
    """Everything produced by one session.

    Attributes:
        walk: The page walk, including every extracted order and the
            early-termination flag.
        summary: Status groups and category sums over ``walk.orders``.
    """

    walk: PageWalkResult = field(default_factory=PageWalkResult)
    summary: OrderSummary = field(default_factory=OrderSummary)


def wait_for_login() -> None:
    """Block until the operator confirms they are logged in.

    Reads a line from standard input, so a closed or redirected stdin
    cannot slip past the gate.

    Raises:
        click.Abort: If standard input reaches EOF before confirmation.
    """
    logger.warning("Please log in manually in the browser window.")
    click.prompt(
        "Press Enter once you're logged in and at the homepage",
        default="",
        show_default=False,
    )


def run(
    config: AppConfig,
    open_page: PageFactory = open_browser,
    login_gate: Callable[[], None] = wait_for_login,
) -> RunResult:
    """Run one extraction session against the configured portal.

    Args:
        config: Application configuration.
        open_page: Context manager factory yielding a page.  Defaults to a
            Playwright-driven Chromium page.
        login_gate: Called between loading the home page and opening the
            order listing; must block until the operator has logged in.

    Returns:
        A :class:`RunResult` with the walk and its aggregates.
    """
    descriptor = build_descriptor(config)

    with open_page(config.browser) as page:
        logger.info("Navigating to %s...", config.site.home_url)
        page.navigate(config.site.home_url)

        login_gate()

        logger.info("Navigating to orders page...")
        page.navigate(config.site.orders_url)

        total_pages = read_total_pages(page, descriptor)
        success(logger, "Detected total pages: %d", total_pages)

        walk = walk_pages(page, descriptor, config.pagination, total_pages)

    for order in walk.orders:
        logger.debug(
            "Order: shop=%r status=%r items=%d total=%s",
            order.shop_name,
            order.delivery_status,
            len(order.items),
            order.total_order_price,
        )

    return RunResult(walk=walk, summary=summarize(walk.orders))
