"""Reconcile OCR-read totals with the extracted items."""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from receiptdraft.domain.receipt import ParsedLineItem, to_money

from .common import TOTAL_TOLERANCE


@dataclass(frozen=True)
class ReconciledTotals:
    subtotal: Decimal
    tax: Decimal
    tip: Decimal
    total: Decimal


def reconcile_totals(
    items: Sequence[ParsedLineItem],
    subtotal: Decimal,
    tax: Decimal,
    tip: Decimal,
    total: Decimal,
) -> ReconciledTotals:
    """
    Make the totals self-consistent.

    A missing subtotal is replaced by the item sum. The total is recomputed
    from subtotal + tax + tip when it is missing or off by more than $1.00.
    """
    subtotal = to_money(subtotal)
    tax = to_money(tax)
    tip = to_money(tip)
    total = to_money(total)

    if subtotal == 0:
        subtotal = to_money(sum((item.total_price for item in items), Decimal("0")))

    expected = subtotal + tax + tip
    if total == 0 or abs(total - expected) > TOTAL_TOLERANCE:
        total = expected
    return ReconciledTotals(subtotal=subtotal, tax=tax, tip=tip, total=total)
