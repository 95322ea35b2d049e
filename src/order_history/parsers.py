"""Field parsers: raw rendered text to typed values.

Every parser accepts the rendered text of one element, or ``None`` when the
element was not found, and returns a
:class:`~order_history.models.ParseResult`.  Parsers never raise on bad
input; failure is represented by the documented default value with
``defaulted=True``.

The ``RULES`` dict maps rule names (used by extraction descriptors and the
``[selectors]`` config section) to parse functions, and ``get_rule()``
provides a lookup with a clear error on unknown names.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from decimal import Decimal, InvalidOperation

from order_history.models import ItemStatus, ParseResult

# Currency markers stripped before parsing a price.  Longer markers first so
# "PHP" is removed whole rather than leaving fragments behind.
CURRENCY_SYMBOLS = ("PHP", "RM", "Rp", "₱", "$", "€", "£", "¥", "₹", "฿", "₫")

_NON_DIGITS = re.compile(r"[^0-9]")
_LEADING_INT = re.compile(r"\d+")


def clean_text(text: str | None) -> ParseResult[str]:
    """Trim rendered text; absent elements become the empty string."""
    if text is None:
        return ParseResult("", defaulted=True)
    return ParseResult(text.strip())


def parse_currency(text: str | None) -> ParseResult[Decimal]:
    """Parse a price string like ``"₱1,200.50"`` into a Decimal.

    Strips currency markers and thousands separators, then parses what is
    left.  Empty, non-numeric, and non-finite input all yield ``0``.
    """
    if text is None:
        return ParseResult(Decimal("0"), defaulted=True)

    cleaned = text
    for symbol in CURRENCY_SYMBOLS:
        cleaned = cleaned.replace(symbol, "")
    cleaned = cleaned.replace(",", "").strip()
    if not cleaned:
        return ParseResult(Decimal("0"), defaulted=True)

    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return ParseResult(Decimal("0"), defaulted=True)
    if not value.is_finite():
        return ParseResult(Decimal("0"), defaulted=True)
    return ParseResult(value)


def parse_quantity(text: str | None) -> ParseResult[int]:
    """Parse a quantity string like ``"x 3"`` or ``"×12"`` into an int.

    Every non-digit character is discarded; nothing left means ``0``.
    """
    if text is None:
        return ParseResult(0, defaulted=True)
    digits = _NON_DIGITS.sub("", text)
    if not digits:
        return ParseResult(0, defaulted=True)
    try:
        return ParseResult(int(digits))
    except ValueError:
        # Beyond the interpreter's int string conversion limit.
        return ParseResult(0, defaulted=True)


def classify_status(text: str | None) -> ParseResult[ItemStatus]:
    """Classify a status badge as refunded, cancelled, or neither.

    "refund" is checked before "cancel", so a badge mentioning both is
    classified as refunded.  A missing badge is neither.
    """
    if text is None:
        return ParseResult(ItemStatus.NEITHER, defaulted=True)
    lowered = text.strip().lower()
    if "refund" in lowered:
        return ParseResult(ItemStatus.REFUNDED)
    if "cancel" in lowered:
        return ParseResult(ItemStatus.CANCELLED)
    return ParseResult(ItemStatus.NEITHER)


def parse_page_count(text: str | None) -> ParseResult[int]:
    """Parse the "last page" pagination control into a page count.

    Uses the first run of digits, like ``parseInt``.  Absent, unparsable,
    or zero counts fall back to a single page.
    """
    if text is None:
        return ParseResult(1, defaulted=True)
    match = _LEADING_INT.search(text)
    if match is None:
        return ParseResult(1, defaulted=True)
    try:
        count = int(match.group(0))
    except ValueError:
        return ParseResult(1, defaulted=True)
    if count < 1:
        return ParseResult(1, defaulted=True)
    return ParseResult(count)


RULES: dict[str, Callable[[str | None], ParseResult]] = {
    "text": clean_text,
    "currency": parse_currency,
    "quantity": parse_quantity,
    "status": classify_status,
    "page_count": parse_page_count,
}


def get_rule(name: str) -> Callable[[str | None], ParseResult]:
    """Look up a parse rule by name.

    Raises:
        KeyError: If no rule is registered under *name*.
    """
    if name not in RULES:
        available = ", ".join(sorted(RULES))
        raise KeyError(f"Unknown parse rule {name!r}. Available: {available}")
    return RULES[name]
