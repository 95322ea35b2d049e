"""Order extraction: one rendered order element to one :class:`Order`.

All reads go through :func:`extract_fields`, which applies a descriptor's
``field name -> FieldSpec`` mapping to an element.  A missing child element
or unparsable text never aborts extraction; the field takes its parser's
default and is logged at DEBUG.  Faults raised by the rendering
collaborator itself are not caught.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from order_history.browser import ElementLike
from order_history.descriptors import FieldSpec, OrderDescriptor
from order_history.models import ItemStatus, Order, OrderItem, ParseResult
from order_history.parsers import get_rule

logger = logging.getLogger(__name__)


def extract_fields(
    element: ElementLike,
    fields: dict[str, FieldSpec],
) -> dict[str, ParseResult]:
    """Read and parse every field in *fields* from *element*.

    Fields are read in mapping order, one collaborator call at a time.

    Returns:
        A dict mapping each field name to its :class:`ParseResult`.
    """
    results: dict[str, ParseResult] = {}
    for name, field_spec in fields.items():
        parse = get_rule(field_spec.rule)
        child = element.locate(field_spec.selector)
        text = child.read_text() if child is not None else None
        result = parse(text)
        if result.defaulted:
            if child is None:
                logger.debug("Field %r not found (%s); using default", name, field_spec.selector)
            else:
                logger.debug("Field %r unreadable (%r); using default", name, text)
        results[name] = result
    return results


def extract_item(element: ElementLike, descriptor: OrderDescriptor) -> OrderItem:
    """Build one :class:`OrderItem` from a rendered item element."""
    fields = extract_fields(element, descriptor.item_fields)
    status = fields.get("status")
    return OrderItem.from_status(
        item_name=_value(fields, "item_name", ""),
        price=_value(fields, "price", Decimal("0")),
        quantity=_value(fields, "quantity", 0),
        status=status.value if status is not None else ItemStatus.NEITHER,
    )


def extract_order(element: ElementLike, descriptor: OrderDescriptor) -> Order:
    """Build one :class:`Order` from a rendered order element.

    The order total is not read from the page; :class:`Order` derives it
    from the extracted items.
    """
    fields = extract_fields(element, descriptor.order_fields)
    items = tuple(
        extract_item(item_el, descriptor)
        for item_el in element.locate_all(descriptor.item_selector)
    )
    return Order(
        shop_name=_value(fields, "shop_name", ""),
        delivery_status=_value(fields, "delivery_status", ""),
        items=items,
    )


def extract_page(page: ElementLike, descriptor: OrderDescriptor) -> list[Order]:
    """Extract every order currently rendered on *page*, in rendering order."""
    return [
        extract_order(order_el, descriptor)
        for order_el in page.locate_all(descriptor.order_selector)
    ]


def _value(fields: dict[str, ParseResult], name: str, default):
    """Return the parsed value of *name*, or *default* if it was not described."""
    result = fields.get(name)
    return result.value if result is not None else default
