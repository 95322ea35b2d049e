"""Aggregation of the extracted order list.

Two deliberately different views are produced:

- :func:`group_by_status` groups on the exact, case-sensitive status string,
  so "Received" and "Delivered" are separate rows.
- :func:`category_sums` compares statuses case-insensitively against fixed
  labels and folds "Received" and "Delivered" into one bucket.
"""

from __future__ import annotations

from decimal import Decimal

from order_history.models import CategorySums, Order, OrderSummary, StatusGroup

CANCELLED_STATUSES = frozenset({"cancelled"})
RECEIVED_STATUSES = frozenset({"received", "delivered"})


def group_by_status(orders: list[Order]) -> list[StatusGroup]:
    """Group *orders* by exact delivery status.

    Groups are sorted by descending count; ties keep the order in which
    each status was first seen.
    """
    groups: dict[str, StatusGroup] = {}
    for order in orders:
        group = groups.get(order.delivery_status)
        if group is None:
            group = groups[order.delivery_status] = StatusGroup(status=order.delivery_status)
        group.count += 1
        group.total += order.total_order_price

    # sorted() is stable, so first-seen order breaks ties.
    return sorted(groups.values(), key=lambda g: -g.count)


def category_sums(orders: list[Order]) -> CategorySums:
    """Compute the overall, cancelled, and received-or-delivered totals."""
    sums = CategorySums()
    for order in orders:
        total = order.total_order_price
        status = order.delivery_status.casefold()

        sums.order_count += 1
        sums.overall_total += total
        if status in CANCELLED_STATUSES:
            sums.cancelled_count += 1
            sums.cancelled_sum += total
        elif status in RECEIVED_STATUSES:
            sums.received_count += 1
            sums.received_sum += total
    return sums


def summarize(orders: list[Order]) -> OrderSummary:
    """Build both aggregate views of *orders*."""
    return OrderSummary(
        status_groups=group_by_status(orders),
        categories=category_sums(orders),
    )


def grand_total(orders: list[Order]) -> Decimal:
    """Sum ``price * quantity`` over every non-refunded item of every order.

    Computed over the flattened item list rather than from the order
    totals.
    """
    return sum(
        (item.line_total for order in orders for item in order.items if not item.is_refunded),
        Decimal("0"),
    )
