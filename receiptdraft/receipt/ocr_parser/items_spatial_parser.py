"""Bounding-box based receipt item extraction."""

from collections.abc import Sequence

from receiptdraft.domain.receipt import ItemCandidate, ParsedLineItem, ReceiptWarning, TextFragment

from .common import DEFAULT_PARSER_RULES, HORIZONTAL_DISTANCE_WEIGHT, RIGHT_OF_PRICE_PENALTY, ParserRules
from .item_filter import ItemFilterContext, find_item_candidates
from .matching import MatchedItem, warn_unmatched_price
from .price_repair import collect_price_candidates


def find_payment_section_start(fragments: Sequence[TextFragment], card_brands: Sequence[str]) -> float | None:
    """Return the vertical position where the payment block begins, if any."""
    for fragment in fragments:
        lowered = fragment.text.lower()
        if "payment" in lowered or any(brand in lowered for brand in card_brands):
            return fragment.vertical_position
    return None


def _pairing_distance(candidate: TextFragment, price: TextFragment) -> float:
    """
    Distance from an item name to a price on the page.

    Vertical offset dominates; names normally sit left of their price, so a
    name to the right of it pays a fixed penalty.
    """
    distance = abs(candidate.vertical_position - price.vertical_position)
    distance += HORIZONTAL_DISTANCE_WEIGHT * abs(candidate.horizontal_position - price.horizontal_position)
    if candidate.horizontal_position > price.horizontal_position:
        distance += RIGHT_OF_PRICE_PENALTY
    return distance


class ProximityMatcher:
    """Pairs each price with the nearest unclaimed item name on the page."""

    def __init__(self, rules: ParserRules = DEFAULT_PARSER_RULES) -> None:
        self.rules = rules

    def match(
        self,
        fragments: Sequence[TextFragment],
        context: ItemFilterContext,
        consumed: set[int],
        warning_sink: list[ReceiptWarning] | None = None,
    ) -> list[MatchedItem]:
        payment_start = find_payment_section_start(fragments, self.rules.card_brands)
        available: list[ItemCandidate] = find_item_candidates(fragments, consumed, context, self.rules)

        currency_confirmed = any("$" in fragment.text for fragment in fragments)
        prices = collect_price_candidates(
            fragments,
            consumed,
            ceiling=self.rules.proximity_price_ceiling,
            currency_confirmed=currency_confirmed,
        )

        matched: list[MatchedItem] = []
        for price in prices:
            price_fragment = fragments[price.source_fragment_index]
            # Card/payment lines below the items carry amounts, not item prices
            if payment_start is not None and price_fragment.vertical_position >= payment_start:
                continue

            best: ItemCandidate | None = None
            best_distance = float("inf")
            for candidate in available:
                distance = _pairing_distance(fragments[candidate.source_fragment_index], price_fragment)
                if distance < best_distance:
                    best, best_distance = candidate, distance

            if best is None or best_distance > self.rules.max_proximity_distance:
                warn_unmatched_price(warning_sink, price, len(matched))
                continue

            available.remove(best)
            consumed.add(best.source_fragment_index)
            consumed.add(price.source_fragment_index)
            matched.append(
                MatchedItem(
                    price_fragment_index=price.source_fragment_index,
                    vertical_position=price_fragment.vertical_position,
                    item=ParsedLineItem(name=best.name, total_price=price.value),
                )
            )

        # Keep duplicates: repeated items with identical prices are valid.
        return matched
