from datetime import datetime
from decimal import Decimal

import pytest

from receiptdraft.domain.receipt import (
    ItemCandidate,
    ParsedLineItem,
    PriceCandidate,
    ReceiptDraft,
    TextFragment,
    to_money,
)


def test_text_fragment_strips_text() -> None:
    fragment = TextFragment(text="  Milk  ", vertical_position=10.0, horizontal_position=5.0)
    assert fragment.text == "Milk"
    assert fragment.has_spatial_data is False


@pytest.mark.parametrize("text", ["", "   ", "\n"])
def test_text_fragment_rejects_empty_text(text: str) -> None:
    with pytest.raises(ValueError):
        TextFragment(text=text, vertical_position=0.0, horizontal_position=0.0)


def test_text_fragment_is_immutable() -> None:
    fragment = TextFragment(text="Milk", vertical_position=0.0, horizontal_position=0.0)
    with pytest.raises(AttributeError):
        fragment.text = "Eggs"  # type: ignore[misc]


def test_price_candidate_rejects_negative_value() -> None:
    with pytest.raises(ValueError):
        PriceCandidate(source_fragment_index=0, value=Decimal("-1.00"), raw_text="-1.00")


def test_item_candidate_validates_name() -> None:
    assert ItemCandidate(source_fragment_index=2, name=" Tea ").name == "Tea"
    with pytest.raises(ValueError):
        ItemCandidate(source_fragment_index=0, name="Ab")
    with pytest.raises(ValueError):
        ItemCandidate(source_fragment_index=0, name="12 34 A")
    with pytest.raises(ValueError):
        ItemCandidate(source_fragment_index=0, name="x" * 51)


def test_parsed_line_item_quantizes_price() -> None:
    item = ParsedLineItem(name="Milk", total_price=Decimal("3.495"))
    assert item.total_price == Decimal("3.50")
    assert item.quantity == 1


def test_parsed_line_item_rejects_bad_values() -> None:
    with pytest.raises(ValueError):
        ParsedLineItem(name="Milk", total_price=Decimal("-0.01"))
    with pytest.raises(ValueError):
        ParsedLineItem(name="Milk", total_price=Decimal("1.00"), quantity=0)


def test_receipt_draft_validates_money_and_confidence() -> None:
    now = datetime(2024, 1, 1)
    with pytest.raises(ValueError):
        ReceiptDraft(store_name="Shop", date=now, tax=Decimal("-1"))
    with pytest.raises(ValueError):
        ReceiptDraft(store_name="Shop", date=now, ocr_confidence=101)


def test_receipt_draft_to_dict_uses_camel_case_keys() -> None:
    draft = ReceiptDraft(
        store_name="WHOLE FOODS MARKET",
        store_address="123 Main Street",
        date=datetime(2024, 3, 14, 12, 30),
        items=[ParsedLineItem(name="Milk", total_price=Decimal("3.49"))],
        subtotal=Decimal("3.49"),
        tax=Decimal("0.28"),
        total=Decimal("3.77"),
        ocr_confidence=80,
    )

    assert draft.to_dict() == {
        "storeName": "WHOLE FOODS MARKET",
        "storeAddress": "123 Main Street",
        "date": "2024-03-14T12:30:00",
        "items": [{"name": "Milk", "totalPrice": 3.49, "quantity": 1}],
        "subtotal": 3.49,
        "tax": 0.28,
        "tip": 0.0,
        "total": 3.77,
        "ocrMethod": "on-device",
        "ocrConfidence": 80,
    }


def test_to_money_rounds_half_up() -> None:
    assert to_money("0.125") == Decimal("0.13")
    assert to_money(4) == Decimal("4.00")
