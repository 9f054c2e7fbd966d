"""Repair OCR-damaged price text into monetary values.

Rules are kept as an ordered list of ``(predicate, action)`` pairs; the first
rule whose predicate holds decides the outcome, so each rule can be tested on
its own and reordered without touching the others.
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from receiptdraft.domain.receipt import PriceCandidate, TextFragment, to_money

from .common import MIN_PRICE_EXCLUSIVE, _looks_like_summary_line

QTY_TIMES_UNIT_PRICE = re.compile(r"^\d+\s+[$S]\d+\.\d{2}$")
S_FOR_DOLLAR = re.compile(r"[Ss](\d+\.\d{2})")
DOLLAR_AMOUNT = re.compile(r"\$(\d+\.?\d*)")
BARE_DECIMAL = re.compile(r"(\d*\.\d{2})[A-Za-z]?")
BARE_SHORT_INTEGER = re.compile(r"\d{1,2}")

# OCR spacing artifacts around dollar amounts, applied in order
DOLLAR_REPAIRS: tuple[tuple[re.Pattern[str], str], ...] = (
    # "$ 4.99" -> "$4.99"
    (re.compile(r"\$\s+(?=\d)"), "$"),
    # "$.99" -> "$0.99"
    (re.compile(r"\$\.(\d{2})\b"), r"$0.\1"),
    # comma read for the decimal point: "$1,12" -> "$1.12"
    (re.compile(r"\$(\d+),(\d{2})\b"), r"$\1.\2"),
    # stray leading digit: "$4 4.99" -> "$4.99"
    (re.compile(r"\$\d\s+(\d+\.\d+)"), r"$\1"),
    # repeated tenths digit: "$0.1 10" -> "$0.10"
    (re.compile(r"\$(\d+)\.\d\s+(\d{2})\b"), r"$\1.\2"),
)


@dataclass(frozen=True)
class PriceToken:
    """Numeric text pulled out of a fragment, before normalization."""

    amount_text: str
    # True when a currency marker ($, or an S misread for $) was present
    marked: bool


PriceRule = tuple[Callable[[str], bool], Callable[[str], PriceToken | None]]


def _reject(_text: str) -> None:
    return None


def _read_dollar_marked(text: str) -> PriceToken | None:
    repaired = text
    for pattern, replacement in DOLLAR_REPAIRS:
        repaired = pattern.sub(replacement, repaired)
    match = DOLLAR_AMOUNT.search(repaired)
    if not match:
        return None
    return PriceToken(amount_text=match.group(1), marked=True)


def _read_s_marked(text: str) -> PriceToken | None:
    match = S_FOR_DOLLAR.search(text)
    if not match:
        return None
    return PriceToken(amount_text=match.group(1), marked=True)


def _read_bare(text: str) -> PriceToken | None:
    compact = re.sub(r"\s+", "", text)
    compact = re.sub(r"\.{2,}", ".", compact)
    decimal_match = BARE_DECIMAL.fullmatch(compact)
    if decimal_match:
        amount = decimal_match.group(1)
        if amount.startswith("."):
            amount = "0" + amount
        return PriceToken(amount_text=amount, marked=False)
    # Ambiguous (cents or dollars?); only trusted when the receipt shows "$" elsewhere
    if BARE_SHORT_INTEGER.fullmatch(compact):
        return PriceToken(amount_text=compact, marked=False)
    return None


PRICE_RULES: tuple[PriceRule, ...] = (
    # Unit-price ("2 @ $1.99") and tax-rate ("8.25%") annotations
    (lambda text: "@" in text or "%" in text, _reject),
    # Quantity times unit price: "2 $1.99"
    (lambda text: QTY_TIMES_UNIT_PRICE.match(text) is not None, _reject),
    (lambda text: "$" in text, _read_dollar_marked),
    (lambda text: S_FOR_DOLLAR.search(text) is not None, _read_s_marked),
    (lambda _text: True, _read_bare),
)


def repair_price_text(text: str) -> PriceToken | None:
    """Apply the price rules to one fragment's text; first applicable rule wins."""
    text = text.strip()
    for predicate, action in PRICE_RULES:
        if predicate(text):
            return action(text)
    return None


def normalize_price_token(token: PriceToken) -> Decimal | None:
    """
    Convert a price token to a cents-quantized amount.

    Marked integers lost their decimal point: "199" -> 1.99, "45" -> 0.45,
    "4" -> 4.00. Unmarked short integers are read as whole dollars.
    """
    amount = token.amount_text.rstrip(".")
    if not amount:
        return None
    if "." not in amount and token.marked:
        if len(amount) >= 3:
            amount = f"{amount[:-2]}.{amount[-2:]}"
        elif len(amount) == 2:
            amount = f"0.{amount}"
        else:
            amount = f"{amount}.00"
    try:
        return to_money(amount)
    except InvalidOperation:
        return None


def is_plausible_item_price(value: Decimal, ceiling: Decimal) -> bool:
    """Return True if value can be a single item's price (not a total or a code)."""
    return MIN_PRICE_EXCLUSIVE < value <= ceiling


def _is_split_decimal_head(token: PriceToken) -> bool:
    amount = token.amount_text.rstrip(".")
    return token.marked and "." not in amount and len(amount) <= 2


def collect_price_candidates(
    fragments: Sequence[TextFragment],
    consumed: set[int],
    *,
    ceiling: Decimal,
    currency_confirmed: bool,
) -> list[PriceCandidate]:
    """
    Read every unconsumed fragment as a price, in fragment order.

    A short dollar-marked integer immediately followed by a bare 1-2 digit
    fragment ("$4", "99") is recovered as one price; the trailing fragment is
    added to ``consumed``.
    """
    candidates: list[PriceCandidate] = []
    for index, fragment in enumerate(fragments):
        if index in consumed:
            continue
        if _looks_like_summary_line(fragment.text):
            continue
        token = repair_price_text(fragment.text)
        if token is None:
            continue
        if not token.marked and "." not in token.amount_text and not currency_confirmed:
            continue

        raw_text = fragment.text
        next_index = index + 1
        tail_index = None
        if (
            _is_split_decimal_head(token)
            and next_index < len(fragments)
            and next_index not in consumed
            and BARE_SHORT_INTEGER.fullmatch(fragments[next_index].text)
        ):
            next_text = fragments[next_index].text
            token = PriceToken(amount_text=f"{token.amount_text.rstrip('.')}.{next_text}", marked=True)
            raw_text = f"{fragment.text} {next_text}"
            tail_index = next_index

        value = normalize_price_token(token)
        if value is None or not is_plausible_item_price(value, ceiling):
            continue
        # Tail is only claimed once the merged price is accepted
        if tail_index is not None:
            consumed.add(tail_index)
        candidates.append(PriceCandidate(source_fragment_index=index, value=value, raw_text=raw_text))
    return candidates
