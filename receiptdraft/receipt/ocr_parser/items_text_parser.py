"""Text-order based receipt item extraction."""

import re
from collections.abc import Sequence
from decimal import Decimal

from receiptdraft.domain.receipt import ParsedLineItem, ReceiptWarning, TextFragment

from .common import (
    DEFAULT_PARSER_RULES,
    SAME_LINE_MAX_PRICE,
    SAME_LINE_MIN_PRICE,
    ParserRules,
    _looks_like_summary_line,
)
from .item_filter import ItemFilterContext, find_item_candidates, is_item_candidate, merge_adjacent_candidates
from .matching import MatchedItem, warn_unmatched_price
from .price_repair import collect_price_candidates

SAME_LINE_ITEM = re.compile(r"^(.+?)\s+\$?(\d+\.\d{2})$")


def extract_same_line_items(
    fragments: Sequence[TextFragment],
    context: ItemFilterContext,
    consumed: set[int],
    rules: ParserRules = DEFAULT_PARSER_RULES,
) -> list[MatchedItem]:
    """
    Pick up fragments that carry both the name and the price ("Coffee $4.99").

    Matched fragments are added to ``consumed`` so later strategies skip them.
    """
    matched: list[MatchedItem] = []
    for index, fragment in enumerate(fragments):
        if index in consumed or _looks_like_summary_line(fragment.text):
            continue
        match = SAME_LINE_ITEM.match(fragment.text)
        if not match:
            continue
        name = match.group(1).strip()
        price = Decimal(match.group(2))
        if not SAME_LINE_MIN_PRICE < price < SAME_LINE_MAX_PRICE:
            continue
        if not is_item_candidate(name, index, context, rules):
            continue
        consumed.add(index)
        matched.append(
            MatchedItem(
                price_fragment_index=index,
                vertical_position=fragment.vertical_position,
                item=ParsedLineItem(name=name, total_price=price),
            )
        )
    return matched


class SequentialMatcher:
    """
    Positional fallback for receipts without geometry.

    Item names found before the totals block are zipped, in order, with the
    prices found anywhere on the receipt. Extra prices are reported as
    possible missed items.
    """

    def __init__(self, rules: ParserRules = DEFAULT_PARSER_RULES) -> None:
        self.rules = rules

    def match(
        self,
        fragments: Sequence[TextFragment],
        context: ItemFilterContext,
        consumed: set[int],
        warning_sink: list[ReceiptWarning] | None = None,
    ) -> list[MatchedItem]:
        candidates = find_item_candidates(fragments, consumed, context, self.rules, stop_at_totals=True)
        candidates = merge_adjacent_candidates(candidates)

        # Bare "4" is only trusted as $4.00 when the receipt prints "$" somewhere
        currency_confirmed = any("$" in fragment.text for fragment in fragments)
        prices = collect_price_candidates(
            fragments,
            consumed,
            ceiling=self.rules.sequential_price_ceiling,
            currency_confirmed=currency_confirmed,
        )

        matched: list[MatchedItem] = []
        for candidate, price in zip(candidates, prices):
            consumed.add(candidate.source_fragment_index)
            consumed.add(price.source_fragment_index)
            matched.append(
                MatchedItem(
                    price_fragment_index=price.source_fragment_index,
                    vertical_position=fragments[price.source_fragment_index].vertical_position,
                    item=ParsedLineItem(name=candidate.name, total_price=price.value),
                )
            )

        for price in prices[len(candidates) :]:
            warn_unmatched_price(warning_sink, price, len(matched))
        return matched
