"""Core data models for Order History Extractor.

This module defines all dataclasses used throughout the extraction
pipeline. It has zero internal imports -- everything depends on it, but it
depends on nothing within the package.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Generic, TypeVar

T = TypeVar("T")


class ItemStatus(enum.Enum):
    """Refund/cancellation classification of a single line item."""

    REFUNDED = "refunded"
    CANCELLED = "cancelled"
    NEITHER = "neither"


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """A parsed field value tagged with whether it fell back to its default.

    Attributes:
        value: The parsed value, or the documented default when the raw
            text was absent or could not be parsed.
        defaulted: True if *value* is the default rather than something
            read from the page.  Lets callers tell "genuinely zero" apart
            from "could not read".
    """

    value: T
    defaulted: bool = False


@dataclass(frozen=True)
class OrderItem:
    """One line item within an order.

    Attributes:
        item_name: Product title as rendered, or empty string.
        price: Unit price with the currency glyph and separators stripped.
        quantity: Unit count.
        is_refunded: True if the item's status badge mentions a refund.
        is_cancelled: True if the item's status badge mentions a
            cancellation (and no refund).
    """

    item_name: str = ""
    price: Decimal = Decimal("0")
    quantity: int = 0
    is_refunded: bool = False
    is_cancelled: bool = False

    def __post_init__(self) -> None:
        if self.is_refunded and self.is_cancelled:
            raise ValueError("An item cannot be both refunded and cancelled")

    @classmethod
    def from_status(
        cls,
        item_name: str,
        price: Decimal,
        quantity: int,
        status: ItemStatus,
    ) -> OrderItem:
        """Build an item whose refund/cancel flags come from *status*."""
        return cls(
            item_name=item_name,
            price=price,
            quantity=quantity,
            is_refunded=status is ItemStatus.REFUNDED,
            is_cancelled=status is ItemStatus.CANCELLED,
        )

    @property
    def status(self) -> ItemStatus:
        if self.is_refunded:
            return ItemStatus.REFUNDED
        if self.is_cancelled:
            return ItemStatus.CANCELLED
        return ItemStatus.NEITHER

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class Order:
    """One purchase grouping as rendered on a results page.

    The order total is never stored: it is derived from the items every
    time it is read, so it cannot drift out of sync with them.

    Attributes:
        shop_name: Seller display name, or empty string if not rendered.
        delivery_status: Raw status text exactly as rendered (trimmed but
            otherwise not normalized).
        items: Line items in rendering order.  May be empty.
    """

    shop_name: str = ""
    delivery_status: str = ""
    items: tuple[OrderItem, ...] = ()

    @property
    def total_order_price(self) -> Decimal:
        """Sum of ``price * quantity`` over items that were not refunded.

        Cancelled-but-not-refunded items are included.
        """
        return sum(
            (item.line_total for item in self.items if not item.is_refunded),
            Decimal("0"),
        )


@dataclass
class StatusGroup:
    """Orders sharing one exact delivery status string.

    Attributes:
        status: The raw delivery status (case-sensitive).
        count: Number of orders with this status.
        total: Sum of ``total_order_price`` across those orders.
    """

    status: str
    count: int = 0
    total: Decimal = Decimal("0")


@dataclass
class CategorySums:
    """The fixed category totals reported in the final summary.

    "Received" and "Delivered" orders are folded into the same bucket.

    Attributes:
        overall_total: Sum over every order.
        cancelled_sum: Sum over orders whose status is "Cancelled".
        received_sum: Sum over orders whose status is "Received" or
            "Delivered".
        order_count: Number of orders.
        cancelled_count: Number of cancelled orders.
        received_count: Number of received plus delivered orders.
    """

    overall_total: Decimal = Decimal("0")
    cancelled_sum: Decimal = Decimal("0")
    received_sum: Decimal = Decimal("0")
    order_count: int = 0
    cancelled_count: int = 0
    received_count: int = 0


@dataclass
class OrderSummary:
    """Both aggregate views of an order list."""

    status_groups: list[StatusGroup] = field(default_factory=list)
    categories: CategorySums = field(default_factory=CategorySums)


@dataclass
class PageWalkResult:
    """Outcome of walking every results page.

    Attributes:
        orders: Every extracted order, in page-then-rendering order.
        total_pages: Page count read from the pagination control.
        pages_scraped: Number of pages actually extracted.
        terminated_early: True if the "next page" control was missing
            before the last page was reached.  The orders collected up to
            that point are still returned.
        elapsed_seconds: Wall-clock duration of the walk.
    """

    orders: list[Order] = field(default_factory=list)
    total_pages: int = 1
    pages_scraped: int = 0
    terminated_early: bool = False
    elapsed_seconds: float = 0.0


@dataclass
class SiteConfig:
    """Portal URLs.

    Attributes:
        home_url: Page opened first so the operator can log in.
        orders_url: Order listing opened after login.
    """

    home_url: str = "https://lazada.com.ph/"
    orders_url: str = "https://my.lazada.com.ph/customer/order/index/"


@dataclass
class BrowserConfig:
    """Browser launch options.

    Attributes:
        headless: Run without a visible window.  The manual login step
            needs a visible window, so this defaults to False.
        slow_mo_ms: Delay Playwright inserts between operations.
    """

    headless: bool = False
    slow_mo_ms: int = 0


@dataclass
class PaginationConfig:
    """How to wait for the next page after clicking "next".

    Attributes:
        settle_delay_ms: Fixed delay used when no readiness signal is
            configured, or when the readiness wait times out.
        ready_selector: Selector that must be attached before the page is
            considered ready.  Empty to disable.
        wait_for_network_idle: Wait for the ``networkidle`` load state.
        ready_timeout_ms: Upper bound for the readiness wait.
        strict: Treat a missing "next" control before the last page as an
            error instead of a warning.
    """

    settle_delay_ms: int = 2000
    ready_selector: str = ""
    wait_for_network_idle: bool = False
    ready_timeout_ms: int = 10_000
    strict: bool = False


@dataclass
class AppConfig:
    """Top-level application configuration loaded from orders.toml.

    Attributes:
        output_file: Path of the exported workbook, relative to the
            project root unless absolute.
        currency_label: Label printed before totals in the summary.
        site: Portal URLs.
        browser: Browser launch options.
        pagination: Pagination wait and strictness options.
        selectors: Raw selector overrides keyed by logical field name.
    """

    output_file: str = "output/Orders.xlsx"
    currency_label: str = "PHP"
    site: SiteConfig = field(default_factory=SiteConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    selectors: dict[str, str] = field(default_factory=dict)
