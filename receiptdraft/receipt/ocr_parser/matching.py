"""Shared types for item/price pairing strategies."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from receiptdraft.domain.receipt import ParsedLineItem, PriceCandidate, ReceiptWarning, TextFragment

from .item_filter import ItemFilterContext


@dataclass(frozen=True)
class MatchedItem:
    """A paired line item, remembering where its price was printed."""

    price_fragment_index: int
    vertical_position: float
    item: ParsedLineItem


class ItemPriceMatcher(Protocol):
    """Pairs item-name candidates with price candidates."""

    def match(
        self,
        fragments: Sequence[TextFragment],
        context: ItemFilterContext,
        consumed: set[int],
        warning_sink: list[ReceiptWarning] | None = None,
    ) -> list[MatchedItem]: ...


def order_matched_items(matched: Sequence[MatchedItem]) -> list[MatchedItem]:
    """Order items by where their price appears on the receipt."""
    return sorted(matched, key=lambda entry: (entry.vertical_position, entry.price_fragment_index))


def warn_unmatched_price(
    warning_sink: list[ReceiptWarning] | None,
    price: PriceCandidate,
    items_so_far: int,
) -> None:
    if warning_sink is None:
        return
    message = f"maybe missed item near price {price.value}"
    if price.raw_text:
        message += f' (context: "{price.raw_text[:80]}")'
    warning_sink.append(
        ReceiptWarning(
            message=message,
            after_item_index=(items_so_far - 1) if items_so_far else None,
        )
    )
