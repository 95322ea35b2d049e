"""Workbook export writer and run summary printer.

- :func:`export` flattens every order into one row per item and writes an
  ``.xlsx`` workbook with a trailing grand total row.
- :func:`print_summary` prints the per-status breakdown and the final
  summary block to stdout.
"""

from __future__ import annotations

import logging
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from order_history.aggregator import grand_total
from order_history.models import Order, OrderSummary, PageWalkResult

logger = logging.getLogger(__name__)

# Fixed header row of the exported sheet.
EXPORT_COLUMNS = [
    "Item Name",
    "Item Price",
    "Item Count (Quantity)",
    "Cancelled / Refunded",
]

GRAND_TOTAL_LABEL = "Grand Total:"


# ---------------------------------------------------------------------------
# Workbook export
# ---------------------------------------------------------------------------


def export(
    orders: list[Order],
    output_path: str | Path,
    sheet_title: str = "Orders",
) -> Path:
    """Write one row per item across every order to an ``.xlsx`` workbook.

    1. Writes the bold :data:`EXPORT_COLUMNS` header row.
    2. Writes each item in order-then-rendering order.  The last column is
       True when the item is either cancelled or refunded.
    3. Skips one row, then writes a bold ``Grand Total:`` row holding the
       sum of ``price * quantity`` over non-refunded items.
    4. Fits column widths to their content.

    The parent directory is created if needed; an existing file is
    overwritten.

    Args:
        orders: Every order extracted in the run.
        output_path: Destination ``.xlsx`` path.
        sheet_title: Name of the worksheet.

    Returns:
        The :class:`~pathlib.Path` to the written workbook.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    ws.append(EXPORT_COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for order in orders:
        for item in order.items:
            ws.append(
                [
                    item.item_name,
                    item.price,
                    item.quantity,
                    item.is_refunded or item.is_cancelled,
                ]
            )

    total_row = ws.max_row + 2
    ws.cell(row=total_row, column=1, value=GRAND_TOTAL_LABEL).font = Font(bold=True)
    ws.cell(row=total_row, column=2, value=grand_total(orders)).font = Font(bold=True)

    _fit_columns(ws)
    wb.save(output_path)

    logger.info("Excel file saved to: %s", output_path)
    return output_path


def _fit_columns(ws) -> None:
    """Size each column to its longest rendered value."""
    for idx, column in enumerate(ws.iter_cols(), start=1):
        longest = max(
            (len(str(cell.value)) for cell in column if cell.value is not None),
            default=0,
        )
        ws.column_dimensions[get_column_letter(idx)].width = longest + 2


# ---------------------------------------------------------------------------
# Summary printer
# ---------------------------------------------------------------------------


def print_summary(
    summary: OrderSummary,
    walk: PageWalkResult | None = None,
    currency_label: str = "PHP",
) -> None:
    """Print the status breakdown and final summary to stdout.

    The breakdown lists every distinct status with its order count and
    sum.  The final block reports the order counts and the three category
    totals, plus a note when pagination ended before the last page.

    Args:
        summary: Aggregates from :func:`order_history.aggregator.summarize`.
        walk: The page walk the orders came from, if available.
        currency_label: Label printed before each total.
    """
    cats = summary.categories

    print("---- Status Breakdown ----")
    for group in summary.status_groups:
        print(f"Status: '{group.status}', Count: {group.count}, Sum: {group.total}")

    print()
    print("========== FINAL SUMMARY ==========")
    print(f"All Orders Count: {cats.order_count}")
    print(f"Received + Delivered Orders Count: {cats.received_count}")
    print(f"Cancelled Orders Count: {cats.cancelled_count}")
    print(f"Overall Total       : {currency_label} {cats.overall_total}")
    print(f"Received Total      : {currency_label} {cats.received_sum}")
    print(f"Cancelled Total     : {currency_label} {cats.cancelled_sum}")

    if walk is not None:
        print(f"Pages Scraped       : {walk.pages_scraped} / {walk.total_pages}")
        if walk.terminated_early:
            print("NOTE: pagination stopped early; totals cover the pages scraped only.")

    print("===================================")
    print()
