"""Tests for order_history.extractor — element trees to Order objects."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal

import pytest

from order_history.descriptors import FieldSpec
from order_history.extractor import extract_fields, extract_item, extract_order, extract_page
from order_history.models import Order, OrderItem


class TestExtractFields:
    """Tests for the generic descriptor-driven field reader."""

    def test_reads_and_parses_each_field(self, fake_element):
        element = fake_element(children={".a": [fake_element(" hi ")], ".b": [fake_element("₱5")]})
        results = extract_fields(
            element, {"name": FieldSpec(".a", "text"), "cost": FieldSpec(".b", "currency")}
        )
        assert results["name"].value == "hi"
        assert results["cost"].value == Decimal("5")
        assert not results["name"].defaulted

    def test_missing_child_is_defaulted(self, fake_element):
        results = extract_fields(fake_element(), {"cost": FieldSpec(".b", "currency")})
        assert results["cost"].value == Decimal("0")
        assert results["cost"].defaulted is True

    def test_defaulted_fields_logged_at_debug(self, fake_element, caplog):
        with caplog.at_level(logging.DEBUG, logger="order_history.extractor"):
            extract_fields(fake_element(), {"cost": FieldSpec(".b", "currency")})
        assert "'cost' not found" in caplog.text


class TestExtractOrder:
    """Tests for extract_order()."""

    def test_shop_a_scenario(self, descriptor, shop_a_order):
        order = extract_order(shop_a_order, descriptor)

        assert order.shop_name == "ShopA"
        assert order.delivery_status == "Delivered"
        assert order.items == (
            OrderItem("Mug", Decimal("1200.50"), 2),
            OrderItem("Spoon", Decimal("50"), 1, is_refunded=True),
        )
        assert order.total_order_price == Decimal("2401.00")

    def test_items_in_rendering_order(self, descriptor, make_order, make_item):
        element = make_order(
            shop="S",
            status="Shipped",
            items=[make_item(name=n, price="₱1", qty="x 1") for n in ("c", "a", "b")],
        )
        order = extract_order(element, descriptor)
        assert [i.item_name for i in order.items] == ["c", "a", "b"]

    def test_cancelled_item(self, descriptor, make_order, make_item):
        element = make_order(
            items=[make_item(name="Bowl", price="₱20", qty="x 2", badge="Cancelled by buyer")]
        )
        item = extract_order(element, descriptor).items[0]
        assert item.is_cancelled is True
        assert item.is_refunded is False

    def test_missing_order_fields_default_to_empty(self, descriptor, make_order):
        order = extract_order(make_order(items=[]), descriptor)
        assert order == Order(shop_name="", delivery_status="", items=())
        assert order.total_order_price == Decimal("0")

    def test_status_text_kept_raw(self, descriptor, make_order):
        order = extract_order(make_order(status=" DeLiVeReD\n"), descriptor)
        assert order.delivery_status == "DeLiVeReD"

    def test_item_with_nothing_rendered_uses_defaults(self, descriptor, make_order, make_item):
        order = extract_order(make_order(items=[make_item()]), descriptor)
        assert order.items == (OrderItem(),)

    def test_unparsable_price_and_quantity(self, descriptor, make_order, make_item):
        element = make_order(items=[make_item(name="Odd", price="free", qty="none")])
        item = extract_order(element, descriptor).items[0]
        assert item.price == Decimal("0")
        assert item.quantity == 0

    def test_collaborator_fault_propagates(self, descriptor, make_order, broken_element):
        element = make_order(shop="S")
        element.children[descriptor.order_fields["delivery_status"].selector] = [broken_element]
        with pytest.raises(RuntimeError, match="closed"):
            extract_order(element, descriptor)


class TestExtractItem:
    def test_descriptor_without_status_field(self, descriptor, make_item):
        fields = {k: v for k, v in descriptor.item_fields.items() if k != "status"}
        item = extract_item(
            make_item(name="Mug", price="₱3", qty="x 1", badge="Refunded"),
            replace(descriptor, item_fields=fields),
        )
        assert item.is_refunded is False


class TestExtractPage:
    def test_orders_in_rendering_order(self, descriptor, fake_element, make_order):
        page = fake_element(
            children={
                descriptor.order_selector: [
                    make_order(shop="First"),
                    make_order(shop="Second"),
                ]
            }
        )
        orders = extract_page(page, descriptor)
        assert [o.shop_name for o in orders] == ["First", "Second"]

    def test_empty_page(self, descriptor, fake_element):
        assert extract_page(fake_element(), descriptor) == []

    def test_idempotent(self, descriptor, fake_element, make_order, shop_a_order):
        page = fake_element(children={descriptor.order_selector: [shop_a_order, make_order()]})
        assert extract_page(page, descriptor) == extract_page(page, descriptor)
