"""Declarative extraction descriptors.

A descriptor says *how to read a page* as data: which selector finds the
order elements, which finds the item elements inside an order, and for
every logical field the selector of the child element holding its text plus
the parse rule applied to that text.  The extractor consumes descriptors
through a single generic routine, so supporting a different markup means
supplying different selectors, not different code.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from order_history.parsers import get_rule

ORDER_FIELDS = ("shop_name", "delivery_status")
ITEM_FIELDS = ("item_name", "price", "quantity", "status")


@dataclass(frozen=True)
class FieldSpec:
    """Where a field's text lives and how to parse it.

    Attributes:
        selector: Selector of the child element, relative to the order or
            item element being read.
        rule: Name of a parse rule registered in
            :data:`order_history.parsers.RULES`.
    """

    selector: str
    rule: str = "text"


@dataclass(frozen=True)
class OrderDescriptor:
    """Complete description of an order listing's markup.

    Attributes:
        order_selector: Matches every order element on a results page.
        item_selector: Matches every item element inside one order.
        order_fields: Field specs read from each order element.
        item_fields: Field specs read from each item element.
        last_page_selector: The pagination control whose text is the
            total page count.
        next_page_selector: The control that advances to the next page.
    """

    order_selector: str
    item_selector: str
    order_fields: dict[str, FieldSpec] = field(default_factory=dict)
    item_fields: dict[str, FieldSpec] = field(default_factory=dict)
    last_page_selector: str = ""
    next_page_selector: str = ""


LAZADA_DESCRIPTOR = OrderDescriptor(
    order_selector='.order-list [tag="order-component"]',
    item_selector=".order-item",
    order_fields={
        "shop_name": FieldSpec(".shop-left-info-name", "text"),
        "delivery_status": FieldSpec(".shop-right-status", "text"),
    },
    item_fields={
        "item_name": FieldSpec(".text.title.item-title", "text"),
        "price": FieldSpec(".item-price", "currency"),
        "quantity": FieldSpec(".item-quantity .text.desc.info.multiply + .text", "quantity"),
        "status": FieldSpec(".item-status.item-capsule", "status"),
    },
    last_page_selector=".next-pagination-list button:last-child",
    next_page_selector=".next-pagination-item.next",
)


def descriptor_from_mapping(
    overrides: dict[str, Any],
    base: OrderDescriptor = LAZADA_DESCRIPTOR,
) -> OrderDescriptor:
    """Apply selector overrides from config to *base*.

    Keys are ``order``, ``item``, ``last_page``, ``next_page``, or one of
    the logical field names in :data:`ORDER_FIELDS` / :data:`ITEM_FIELDS`.
    A field value is either a selector string (keeping the base rule) or a
    table with ``selector`` and optional ``rule`` keys.

    Raises:
        KeyError: If a key is not a known field or a rule name is not
            registered.
    """
    top_level = {
        "order": "order_selector",
        "item": "item_selector",
        "last_page": "last_page_selector",
        "next_page": "next_page_selector",
    }
    changes: dict[str, Any] = {}
    order_fields = dict(base.order_fields)
    item_fields = dict(base.item_fields)

    for key, value in overrides.items():
        if key in top_level:
            changes[top_level[key]] = str(value)
        elif key in ORDER_FIELDS:
            order_fields[key] = _field_spec(key, value, order_fields.get(key))
        elif key in ITEM_FIELDS:
            item_fields[key] = _field_spec(key, value, item_fields.get(key))
        else:
            known = sorted([*top_level, *ORDER_FIELDS, *ITEM_FIELDS])
            raise KeyError(f"Unknown selector key {key!r}. Known: {', '.join(known)}")

    return replace(base, order_fields=order_fields, item_fields=item_fields, **changes)


def _field_spec(key: str, value: Any, current: FieldSpec | None) -> FieldSpec:
    """Build a FieldSpec for *key* from a config value."""
    default_rule = current.rule if current is not None else "text"
    if isinstance(value, dict):
        selector = value.get("selector", current.selector if current else "")
        rule = value.get("rule", default_rule)
    else:
        selector, rule = str(value), default_rule
    # Fail at load time rather than on the first page.
    get_rule(rule)
    return FieldSpec(selector=selector, rule=rule)
