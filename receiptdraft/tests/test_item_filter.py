import pytest

from receiptdraft.domain.receipt import ItemCandidate
from receiptdraft.receipt.ocr_parser.common import build_parser_rules
from receiptdraft.receipt.ocr_parser.fragments import preprocess_blocks
from receiptdraft.receipt.ocr_parser.item_filter import (
    ItemFilterContext,
    find_item_candidates,
    is_item_candidate,
    merge_adjacent_candidates,
)

# Past the header window, so address-like rules do not apply
BODY_INDEX = 20


def test_store_location_is_not_an_item() -> None:
    assert not is_item_candidate("Greenville #1005", BODY_INDEX)


@pytest.mark.parametrize("text", ["Bananas", "Tea", "Hot Sauce", "Authentic Salsa", "Cashews", "Antipasto"])
def test_plain_item_names_pass(text: str) -> None:
    assert is_item_candidate(text, BODY_INDEX)


@pytest.mark.parametrize(
    "text",
    [
        "Ab",
        "12.99",
        "4.99 F",
        "Visa ending 1234",
        "SUBTOTAL",
        "Cashier: Ann",
        "Thank you for shopping",
        "Springfield, IL",
        "(555) 123-4567",
        "Member # 12345678",
        "**** 4421",
        "Saturday",
        "Extra Hot",
        "Iced",
        "x" * 51,
    ],
)
def test_noise_is_rejected(text: str) -> None:
    assert not is_item_candidate(text, BODY_INDEX)


def test_detected_store_name_and_address_are_not_items() -> None:
    context = ItemFilterContext(store_name="Trader Joes", store_address="4521 Ocean Breeze, Springfield, IL 62701")

    assert not is_item_candidate("Trader Joe's", BODY_INDEX, context)
    assert not is_item_candidate("TRADER  JOES", BODY_INDEX, context)
    assert not is_item_candidate("4521 Ocean Breeze", BODY_INDEX, context)


def test_unknown_store_placeholder_does_not_block_items() -> None:
    context = ItemFilterContext(store_name="Unknown Store")
    assert is_item_candidate("Unknown Store", BODY_INDEX, context)


def test_address_like_text_only_rejected_in_header() -> None:
    assert not is_item_candidate("1200 Harbor View", 3)
    assert is_item_candidate("1200 Harbor View", BODY_INDEX)
    assert not is_item_candidate("2 Oak Ct", 2)
    assert is_item_candidate("1 Pasta Sauce", 2)


def test_extra_exclusion_keywords_from_rules() -> None:
    rules = build_parser_rules({"item_filter": {"extra_exclusion_keywords": ["Bag Fee"]}})

    assert not is_item_candidate("Paper Bag Fee", BODY_INDEX, rules=rules)
    assert is_item_candidate("Paper Bag Fee", BODY_INDEX)


def test_find_item_candidates_stops_at_totals_block() -> None:
    fragments = preprocess_blocks(["Bananas", "$1.99", "SUB TOTAL $1.99", "Gift Bag"]).fragments

    stopped = find_item_candidates(fragments, set(), ItemFilterContext(), stop_at_totals=True)
    everything = find_item_candidates(fragments, set(), ItemFilterContext())

    assert [c.name for c in stopped] == ["Bananas"]
    assert [c.name for c in everything] == ["Bananas", "Gift Bag"]


def test_find_item_candidates_skips_consumed() -> None:
    fragments = preprocess_blocks(["Bananas", "Milk"]).fragments

    candidates = find_item_candidates(fragments, {0}, ItemFilterContext())

    assert [(c.source_fragment_index, c.name) for c in candidates] == [(1, "Milk")]


def test_adjacent_split_name_is_merged() -> None:
    merged = merge_adjacent_candidates(
        [
            ItemCandidate(source_fragment_index=4, name="CHOCOLATE CHIP"),
            ItemCandidate(source_fragment_index=5, name="COOKIES"),
            ItemCandidate(source_fragment_index=7, name="Milk"),
        ]
    )

    assert [(c.source_fragment_index, c.name) for c in merged] == [
        (4, "CHOCOLATE CHIP COOKIES"),
        (7, "Milk"),
    ]


@pytest.mark.parametrize(
    ("first", "second"),
    [
        (ItemCandidate(source_fragment_index=4, name="CHOCOLATE CHIP"), ItemCandidate(6, "COOKIES")),
        (ItemCandidate(source_fragment_index=4, name="Bananas"), ItemCandidate(5, "Milk")),
        (ItemCandidate(source_fragment_index=4, name="Sparkling Water"), ItemCandidate(5, "12PACK")),
        (ItemCandidate(source_fragment_index=4, name="Organic Apples"), ItemCandidate(5, "Honeycrisps")),
        (ItemCandidate(source_fragment_index=4, name="Organic Apples"), ItemCandidate(5, "Red Delicious")),
        (ItemCandidate(source_fragment_index=4, name="Extra Long Name " + "x" * 30), ItemCandidate(5, "Bread")),
    ],
)
def test_merge_conditions(first: ItemCandidate, second: ItemCandidate) -> None:
    assert merge_adjacent_candidates([first, second]) == [first, second]
