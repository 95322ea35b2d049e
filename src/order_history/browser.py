"""Rendering collaborator interface and its Playwright implementation.

The extractor and navigator only ever talk to the small capability surface
defined by :class:`ElementLike` and :class:`PageLike`: locate one or all
matching children, read rendered text, click, navigate, and wait for the
page to be ready.  :class:`PlaywrightPage` and :class:`PlaywrightElement`
adapt Playwright's sync API to that surface; tests substitute fakes that
return canned element trees.

Design decisions:
- **Sync API**: pagination mutates one shared remote page, so every call is
  made strictly in sequence.  Playwright's sync API makes each call a
  blocking step in that sequence.
- **Headful by default**: the operator logs in by hand in the browser
  window.
- **Readiness over sleeping**: after a "next" click the page waits for a
  configured marker selector or network idle, and only falls back to the
  fixed settle delay when neither is configured or the wait times out.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from playwright.sync_api import ElementHandle, Page, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from order_history.models import BrowserConfig, PaginationConfig

logger = logging.getLogger(__name__)


class ElementLike(Protocol):
    """A rendered element (or a whole page) that can be searched and read."""

    def locate(self, selector: str) -> ElementLike | None:
        """Return the first descendant matching *selector*, or ``None``."""
        ...

    def locate_all(self, selector: str) -> list[ElementLike]:
        """Return every descendant matching *selector*, in rendering order."""
        ...

    def read_text(self) -> str:
        """Return the rendered text (``innerText``), not the markup."""
        ...

    def click(self) -> None:
        ...


class PageLike(ElementLike, Protocol):
    """A browser page: an element root that can also navigate and settle."""

    def navigate(self, url: str) -> None:
        ...

    def wait_until_ready(self, pagination: PaginationConfig) -> bool:
        """Block until the page has re-rendered after a navigation action.

        Returns:
            True if an explicit readiness signal was observed, False if the
            fixed settle delay was used instead.
        """
        ...


# ---------------------------------------------------------------------------
# Playwright adapters
# ---------------------------------------------------------------------------


class PlaywrightElement:
    """:class:`ElementLike` backed by a Playwright ``ElementHandle``."""

    def __init__(self, handle: ElementHandle) -> None:
        self._handle = handle

    def locate(self, selector: str) -> PlaywrightElement | None:
        found = self._handle.query_selector(selector)
        return PlaywrightElement(found) if found is not None else None

    def locate_all(self, selector: str) -> list[PlaywrightElement]:
        return [PlaywrightElement(h) for h in self._handle.query_selector_all(selector)]

    def read_text(self) -> str:
        return self._handle.inner_text()

    def click(self) -> None:
        self._handle.click()


class PlaywrightPage:
    """:class:`PageLike` backed by a Playwright ``Page``."""

    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    def locate(self, selector: str) -> PlaywrightElement | None:
        found = self._page.query_selector(selector)
        return PlaywrightElement(found) if found is not None else None

    def locate_all(self, selector: str) -> list[PlaywrightElement]:
        return [PlaywrightElement(h) for h in self._page.query_selector_all(selector)]

    def read_text(self) -> str:
        return self._page.inner_text("body")

    def click(self) -> None:
        self._page.click("body")

    def navigate(self, url: str) -> None:
        self._page.goto(url, wait_until="domcontentloaded")

    def wait_until_ready(self, pagination: PaginationConfig) -> bool:
        timeout = pagination.ready_timeout_ms
        signalled = False

        try:
            if pagination.ready_selector:
                self._page.wait_for_selector(
                    pagination.ready_selector, state="attached", timeout=timeout
                )
                signalled = True
            if pagination.wait_for_network_idle:
                self._page.wait_for_load_state("networkidle", timeout=timeout)
                signalled = True
        except PlaywrightTimeoutError:
            logger.warning(
                "Page not ready after %d ms; falling back to a %d ms settle delay",
                timeout,
                pagination.settle_delay_ms,
            )
            signalled = False

        if not signalled:
            self._page.wait_for_timeout(pagination.settle_delay_ms)
        return signalled


@contextmanager
def open_browser(config: BrowserConfig) -> Iterator[PlaywrightPage]:
    """Launch Chromium and yield a fresh page wrapped as a :class:`PlaywrightPage`.

    The browser context and the browser are always closed on exit, including
    when the body raises.
    """
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=config.headless, slow_mo=config.slow_mo_ms)
        context = browser.new_context()
        page = context.new_page()
        try:
            yield PlaywrightPage(page)
        finally:
            context.close()
            browser.close()


def install_browser() -> int:
    """Download the Chromium build Playwright drives.

    Returns:
        The exit status of ``playwright install chromium``.
    """
    logger.info("Checking/downloading Chromium if not present...")
    completed = subprocess.run(
        [sys.executable, "-m", "playwright", "install", "chromium"],
        check=False,
    )
    return completed.returncode
