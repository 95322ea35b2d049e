"""Shared pytest fixtures for Order History Extractor tests.

Provides a fake rendering collaborator so extraction and pagination can be
tested against canned element trees without a live browser:

- FakeElement: an element with rendered text and children keyed by selector.
- FakePage: a sequence of results pages; clicking its "next" control
  advances to the following page.
- Builder fixtures for order/item elements using the built-in Lazada selectors.
- sample_orders: realistic Order objects covering every status bucket.
"""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from order_history.descriptors import LAZADA_DESCRIPTOR
from order_history.models import Order, OrderItem, PaginationConfig

D = LAZADA_DESCRIPTOR


# ---------------------------------------------------------------------------
# Fake collaborator
# ---------------------------------------------------------------------------


class FakeElement:
    """Element whose children are looked up by exact selector string."""

    def __init__(self, text: str = "", children: dict | None = None, on_click=None) -> None:
        self.text = text
        self.children: dict[str, list[FakeElement]] = children or {}
        self.on_click = on_click
        self.clicks = 0

    def locate(self, selector: str):
        found = self.children.get(selector, [])
        return found[0] if found else None

    def locate_all(self, selector: str):
        return list(self.children.get(selector, []))

    def read_text(self) -> str:
        return self.text

    def click(self) -> None:
        self.clicks += 1
        if self.on_click is not None:
            self.on_click()


class BrokenElement(FakeElement):
    """Element whose text cannot be read, as when the browser has crashed."""

    def read_text(self) -> str:
        raise RuntimeError("Target page, context or browser has been closed")


class FakePage:
    """A paginated listing built from per-page lists of order elements.

    Args:
        pages: Order elements on each results page.
        next_on: Whether page *n* (0-based) renders a "next" control.
            Defaults to every page but the last.
        last_page_text: Text of the "last page" control, or None to omit it.
    """

    def __init__(
        self,
        pages: list[list[FakeElement]],
        next_on: list[bool] | None = None,
        last_page_text: str | None = None,
    ) -> None:
        if next_on is None:
            next_on = [i < len(pages) - 1 for i in range(len(pages))]
        self.current = 0
        self.navigations: list[str] = []
        self.ready_waits = 0
        self.roots: list[FakeElement] = []
        for orders, has_next in zip(pages, next_on):
            children: dict[str, list[FakeElement]] = {D.order_selector: list(orders)}
            if has_next:
                children[D.next_page_selector] = [FakeElement("Next", on_click=self._advance)]
            if last_page_text is not None:
                children[D.last_page_selector] = [FakeElement(last_page_text)]
            self.roots.append(FakeElement(children=children))

    def _advance(self) -> None:
        self.current += 1

    def locate(self, selector: str):
        return self.roots[self.current].locate(selector)

    def locate_all(self, selector: str):
        return self.roots[self.current].locate_all(selector)

    def read_text(self) -> str:
        return ""

    def click(self) -> None:
        pass

    def navigate(self, url: str) -> None:
        self.navigations.append(url)

    def wait_until_ready(self, pagination: PaginationConfig) -> bool:
        self.ready_waits += 1
        return True


# ---------------------------------------------------------------------------
# Element builders
# ---------------------------------------------------------------------------


def _child(children: dict, selector: str, text: str | None) -> None:
    if text is not None:
        children[selector] = [FakeElement(text)]


def _make_item(
    name: str | None = None,
    price: str | None = None,
    qty: str | None = None,
    badge: str | None = None,
) -> FakeElement:
    """Build an item element; a None argument leaves that child out."""
    children: dict[str, list[FakeElement]] = {}
    _child(children, D.item_fields["item_name"].selector, name)
    _child(children, D.item_fields["price"].selector, price)
    _child(children, D.item_fields["quantity"].selector, qty)
    _child(children, D.item_fields["status"].selector, badge)
    return FakeElement(children=children)


def _make_order(
    shop: str | None = None,
    status: str | None = None,
    items: list[FakeElement] | None = None,
) -> FakeElement:
    """Build an order element; a None shop or status leaves that child out."""
    children: dict[str, list[FakeElement]] = {D.item_selector: list(items or [])}
    _child(children, D.order_fields["shop_name"].selector, shop)
    _child(children, D.order_fields["delivery_status"].selector, status)
    return FakeElement(children=children)


def _shop_a_order() -> FakeElement:
    return _make_order(
        shop="  ShopA ",
        status="Delivered",
        items=[
            _make_item(name="Mug", price="₱1,200.50", qty="x 2"),
            _make_item(name="Spoon", price="₱50", qty="x 1", badge="Refunded"),
        ],
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo handler and level changes made by configure_logging()."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def fake_element():
    """The FakeElement class, for building element trees inline."""
    return FakeElement


@pytest.fixture
def broken_element():
    """An element whose text read fails like a crashed browser."""
    return BrokenElement()


@pytest.fixture
def fake_page():
    """The FakePage class; call it with per-page order elements."""
    return FakePage


@pytest.fixture
def make_item():
    """Builder for item elements; a None argument leaves that child out."""
    return _make_item


@pytest.fixture
def make_order():
    """Builder for order elements; a None shop or status leaves that child out."""
    return _make_order


@pytest.fixture
def shop_a_order() -> FakeElement:
    """The ShopA order: one normal item and one refunded item."""
    return _shop_a_order()


@pytest.fixture
def descriptor():
    """The built-in Lazada extraction descriptor."""
    return LAZADA_DESCRIPTOR


@pytest.fixture
def sample_orders() -> list[Order]:
    """Six orders spanning delivered, received, cancelled, and other statuses.

    Includes:
    - Two "Delivered" orders and one "Received" order (folded together in
      the category sums but separate status groups)
    - One "Cancelled" and one lower-case "cancelled" order
    - One "To Ship" order that falls in no category bucket
    - A refunded item (excluded from totals) and a cancelled item (included)
    """
    return [
        Order(
            shop_name="ShopA",
            delivery_status="Delivered",
            items=(
                OrderItem("Mug", Decimal("1200.50"), 2),
                OrderItem("Spoon", Decimal("50"), 1, is_refunded=True),
            ),
        ),
        Order(
            shop_name="ShopB",
            delivery_status="Delivered",
            items=(OrderItem("Cable", Decimal("99.00"), 3),),
        ),
        Order(
            shop_name="ShopC",
            delivery_status="Received",
            items=(OrderItem("Lamp", Decimal("450.25"), 1),),
        ),
        Order(
            shop_name="ShopD",
            delivery_status="Cancelled",
            items=(OrderItem("Chair", Decimal("1500"), 1, is_cancelled=True),),
        ),
        Order(
            shop_name="ShopE",
            delivery_status="cancelled",
            items=(OrderItem("Desk", Decimal("10"), 2, is_cancelled=True),),
        ),
        Order(
            shop_name="ShopF",
            delivery_status="To Ship",
            items=(OrderItem("Pen", Decimal("5"), 10),),
        ),
    ]
