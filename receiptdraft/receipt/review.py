"""Edit a receipt draft before saving.

Every edit keeps the money fields consistent: the subtotal is the sum of the
item prices and the total is always subtotal + tax + tip.
"""

from datetime import datetime
from decimal import Decimal

from receiptdraft.domain.receipt import ParsedLineItem, ReceiptDraft, to_money

MISSING_FIELDS_MESSAGE = "Please fill in store name and at least one item"


def _non_negative(value: Decimal | int | str, field_name: str) -> Decimal:
    amount = to_money(value)
    if amount < 0:
        raise ValueError(f"{field_name} must be non-negative, got {amount}")
    return amount


def _check_index(draft: ReceiptDraft, index: int) -> None:
    if not 0 <= index < len(draft.items):
        raise IndexError(f"item index {index} out of range for {len(draft.items)} items")


def recalculate_totals(draft: ReceiptDraft) -> ReceiptDraft:
    draft.subtotal = to_money(sum((item.total_price for item in draft.items), Decimal("0")))
    draft.total = draft.subtotal + draft.tax + draft.tip
    return draft


def create_manual_draft(now: datetime | None = None) -> ReceiptDraft:
    """Blank draft for typing a receipt in by hand: one empty item, no amounts."""
    return ReceiptDraft(
        store_name="",
        date=now or datetime.now(),
        items=[ParsedLineItem(name="", total_price=Decimal("0"))],
        ocr_method="manual",
        ocr_confidence=0,
    )


def update_item(
    draft: ReceiptDraft,
    index: int,
    *,
    name: str | None = None,
    total_price: Decimal | int | str | None = None,
) -> ReceiptDraft:
    _check_index(draft, index)
    item = draft.items[index]
    if name is not None:
        item.name = name.strip()
    if total_price is not None:
        item.total_price = _non_negative(total_price, "total_price")
    return recalculate_totals(draft)


def add_item(draft: ReceiptDraft, name: str = "", total_price: Decimal | int | str = 0) -> ReceiptDraft:
    draft.items.append(ParsedLineItem(name=name.strip(), total_price=_non_negative(total_price, "total_price")))
    return recalculate_totals(draft)


def remove_item(draft: ReceiptDraft, index: int) -> ReceiptDraft:
    _check_index(draft, index)
    del draft.items[index]
    return recalculate_totals(draft)


def set_tax(draft: ReceiptDraft, tax: Decimal | int | str) -> ReceiptDraft:
    draft.tax = _non_negative(tax, "tax")
    return recalculate_totals(draft)


def set_tip(draft: ReceiptDraft, tip: Decimal | int | str) -> ReceiptDraft:
    draft.tip = _non_negative(tip, "tip")
    return recalculate_totals(draft)


def set_store_name(draft: ReceiptDraft, store_name: str) -> ReceiptDraft:
    draft.store_name = store_name.strip()
    return draft


def validate_draft_for_save(draft: ReceiptDraft) -> list[str]:
    """
    Return the problems that block saving; empty when the draft can be saved.

    A draft needs a store name and at least one named item.
    """
    has_named_item = any(item.name.strip() for item in draft.items)
    if not draft.store_name.strip() or not has_named_item:
        return [MISSING_FIELDS_MESSAGE]
    return []
