from decimal import Decimal

from receiptdraft.domain.receipt import ParsedLineItem
from receiptdraft.receipt.ocr_parser.reconcile import reconcile_totals

ZERO = Decimal("0")


def _items(*prices: str) -> list[ParsedLineItem]:
    return [ParsedLineItem(name=f"Item {i}", total_price=Decimal(price)) for i, price in enumerate(prices)]


def test_missing_total_is_rebuilt_from_items_and_tax() -> None:
    totals = reconcile_totals(_items("10.00", "2.34"), ZERO, Decimal("1.00"), ZERO, ZERO)

    assert totals.subtotal == Decimal("12.34")
    assert totals.tax == Decimal("1.00")
    assert totals.total == Decimal("13.34")


def test_total_within_a_dollar_is_kept() -> None:
    totals = reconcile_totals(_items("5.48"), Decimal("5.48"), Decimal("0.48"), ZERO, Decimal("6.20"))

    assert totals.total == Decimal("6.20")


def test_total_far_from_expected_is_replaced() -> None:
    totals = reconcile_totals(_items("5.48"), Decimal("5.48"), Decimal("0.48"), ZERO, Decimal("20.00"))

    assert totals.total == Decimal("5.96")


def test_ocr_subtotal_is_kept_even_when_items_disagree() -> None:
    totals = reconcile_totals(_items("5.00"), Decimal("10.00"), ZERO, ZERO, ZERO)

    assert totals.subtotal == Decimal("10.00")
    assert totals.total == Decimal("10.00")


def test_tip_is_part_of_expected_total() -> None:
    totals = reconcile_totals(_items("20.00"), ZERO, Decimal("1.60"), Decimal("4.00"), ZERO)

    assert totals.total == Decimal("25.60")


def test_no_items_and_no_amounts() -> None:
    totals = reconcile_totals([], ZERO, ZERO, ZERO, ZERO)

    assert (totals.subtotal, totals.tax, totals.tip, totals.total) == (ZERO, ZERO, ZERO, ZERO)
