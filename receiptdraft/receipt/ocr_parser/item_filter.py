"""Decide which fragments can be item names."""

from collections.abc import Sequence
from dataclasses import dataclass

from receiptdraft.domain.receipt import ItemCandidate, TextFragment

from .common import (
    DEFAULT_PARSER_RULES,
    HEADER_ADDRESS_NUMBER_PATTERN,
    HEADER_ADDRESS_WORDS_PATTERN,
    HEADER_FRAGMENT_LIMIT,
    ITEM_NOISE_PATTERNS,
    STREET_SUFFIX_WORD,
    UNKNOWN_STORE_NAME,
    ParserRules,
    _alpha_count,
    _is_end_of_items_marker,
    _normalize_for_comparison,
)

MAX_MERGE_TAIL_LENGTH = 10


@dataclass(frozen=True)
class ItemFilterContext:
    """Header fields already detected; item names must not repeat them."""

    store_name: str | None = None
    store_address: str | None = None

    def header_names(self) -> frozenset[str]:
        names: set[str] = set()
        if self.store_name and self.store_name != UNKNOWN_STORE_NAME:
            names.add(_normalize_for_comparison(self.store_name))
        if self.store_address:
            names.add(_normalize_for_comparison(self.store_address))
            # Address may have been extended with the city line; compare parts too
            names.update(_normalize_for_comparison(part) for part in self.store_address.split(",") if part.strip())
        return frozenset(names)


def _is_modifier_phrase(text: str, rules: ParserRules) -> bool:
    """Return True for short add-on phrases like "Extra Hot" or "Iced"."""
    words = [word.strip(".,:;()") for word in text.lower().split()]
    words = [word for word in words if word]
    if not words or len(words) > 2:
        return False
    return all(word in rules.modifier_words for word in words)


def _looks_like_header_address(text: str) -> bool:
    """
    Return True if a header fragment reads like a street address.

    Requires a house number of 100+ or a street-suffix word so that item
    names such as "1 Pasta Sauce" are not mistaken for addresses.
    """
    number_match = HEADER_ADDRESS_NUMBER_PATTERN.match(text)
    if number_match and int(number_match.group(1)) >= 100:
        return True
    return bool(HEADER_ADDRESS_WORDS_PATTERN.match(text) and STREET_SUFFIX_WORD.search(text))


def is_item_candidate(
    text: str,
    index: int,
    context: ItemFilterContext | None = None,
    rules: ParserRules = DEFAULT_PARSER_RULES,
) -> bool:
    """Return True if the fragment text at ``index`` is plausibly an item name."""
    text = text.strip()
    if not 3 <= len(text) <= 50:
        return False
    if _alpha_count(text) < 3:
        return False
    if any(pattern.search(text) for pattern in ITEM_NOISE_PATTERNS):
        return False

    lowered = text.lower()
    if any(keyword in lowered for keyword in rules.exclusion_keywords):
        return False
    if _is_modifier_phrase(text, rules):
        return False

    context = context or ItemFilterContext()
    if _normalize_for_comparison(text) in context.header_names():
        return False

    if index < HEADER_FRAGMENT_LIMIT and _looks_like_header_address(text):
        return False
    return True


def find_item_candidates(
    fragments: Sequence[TextFragment],
    consumed: set[int],
    context: ItemFilterContext | None = None,
    rules: ParserRules = DEFAULT_PARSER_RULES,
    *,
    stop_at_totals: bool = False,
) -> list[ItemCandidate]:
    """Collect unconsumed item-name candidates in fragment order."""
    candidates: list[ItemCandidate] = []
    for index, fragment in enumerate(fragments):
        if stop_at_totals and _is_end_of_items_marker(fragment.text):
            break
        if index in consumed:
            continue
        if is_item_candidate(fragment.text, index, context, rules):
            candidates.append(ItemCandidate(source_fragment_index=index, name=fragment.text))
    return candidates


def _can_lead_merge(name: str) -> bool:
    return " " in name or name.isupper()


def _can_trail_merge(name: str) -> bool:
    return " " not in name and len(name) <= MAX_MERGE_TAIL_LENGTH and not name[:1].isdigit()


def merge_adjacent_candidates(candidates: Sequence[ItemCandidate]) -> list[ItemCandidate]:
    """
    Rejoin item names the recognizer split across two adjacent blocks.

    "CHOCOLATE CHIP" followed by "COOKIES" becomes "CHOCOLATE CHIP COOKIES".
    """
    merged: list[ItemCandidate] = []
    i = 0
    while i < len(candidates):
        current = candidates[i]
        if i + 1 < len(candidates):
            following = candidates[i + 1]
            combined = f"{current.name} {following.name}"
            if (
                following.source_fragment_index == current.source_fragment_index + 1
                and _can_lead_merge(current.name)
                and _can_trail_merge(following.name)
                and len(combined) <= 50
            ):
                merged.append(ItemCandidate(source_fragment_index=current.source_fragment_index, name=combined))
                i += 2
                continue
        merged.append(current)
        i += 1
    return merged
