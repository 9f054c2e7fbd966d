"""Store name/address/date/summary amount extraction helpers."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from receiptdraft.domain.receipt import TextFragment, to_money

from .common import (
    CASHIER_PATTERN,
    CITY_STATE_ZIP_PATTERN,
    DATE_PATTERN,
    HEADER_FRAGMENT_LIMIT,
    PHONE_PATTERN,
    PRICE_IN_TEXT_PATTERN,
    PURE_NUMERIC_PATTERN,
    STATE_ZIP_PATTERN,
    STORE_NAME_SCAN_LIMIT,
    STREET_ADDRESS_PATTERN,
    STREET_SUFFIXES,
    SUMMARY_PATTERNS,
    TIME_PATTERN,
    UNKNOWN_STORE_NAME,
)

ALL_CAPS_STORE_NAME = re.compile(r"^[A-Z][A-Z\s'&.)-]+$")
TITLE_CASE_STORE_NAME = re.compile(r"^[A-Z][a-z]+(\s+[A-Z][a-z]+)*$")

STREET_ADDRESS_SEARCH = re.compile(
    rf"\b\d+\s+[A-Za-z0-9 .'-]*?\b(?:{STREET_SUFFIXES})\b\.?",
    re.IGNORECASE,
)
BARE_ADDRESS_SEARCH = re.compile(r"^\d{3,6}\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*")
# "Springfield, IL" / "Springfield, IL 62701" / "Springfield IL 62701", never across lines
CITY_STATE = (
    r"([A-Z][A-Za-z .'-]*?"
    r"(?:,[ \t]*[A-Z]{2}(?:[ \t]+\d{5}(?:-\d{4})?)?|[ \t]+[A-Z]{2}[ \t]+\d{5}(?:-\d{4})?))\b"
)
CITY_STATE_SAME_LINE = re.compile(r"[ \t,]*" + CITY_STATE)
CITY_STATE_LINE = re.compile(CITY_STATE + r"[ \t]*")

AMOUNT = r"[:\s]+\$?(\d+\.?\d{2})"
SUMMARY_LABEL_PATTERNS = {
    # Skip "TOTAL SAVINGS", "TOTAL ITEMS" etc. - these are not the amount paid
    "total": re.compile(r"\btotal(?!\s+(?:savings|saved|discounts?|items|number))" + AMOUNT, re.IGNORECASE),
    "subtotal": re.compile(r"\bsub[\s-]?total" + AMOUNT, re.IGNORECASE),
    "tax": re.compile(r"\btax" + AMOUNT, re.IGNORECASE),
    "tip": re.compile(r"\b(?:tip|gratuity)" + AMOUNT, re.IGNORECASE),
}


@dataclass(frozen=True)
class SummaryAmounts:
    """Amounts printed in the totals block; 0 when not found."""

    subtotal: Decimal = Decimal("0.00")
    tax: Decimal = Decimal("0.00")
    tip: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")


def _is_header_boilerplate(text: str) -> bool:
    """Return True if a header line is receipt boilerplate rather than a store name."""
    return bool(
        DATE_PATTERN.search(text)
        or TIME_PATTERN.search(text)
        or PHONE_PATTERN.search(text)
        or CASHIER_PATTERN.search(text)
        or PURE_NUMERIC_PATTERN.match(text)
        or STATE_ZIP_PATTERN.search(text)
        or STREET_ADDRESS_PATTERN.search(text)
        or CITY_STATE_ZIP_PATTERN.match(text)
        or PRICE_IN_TEXT_PATTERN.search(text)
        or SUMMARY_PATTERNS.search(text)
    )


def extract_store_name(fragments: Sequence[TextFragment]) -> str:
    """
    Pick the store name from the header fragments.

    Strategy order:
    1. First all-caps line (logos usually print in capitals)
    2. First title-case line
    3. First remaining candidate
    """
    candidates = [
        fragment.text
        for fragment in fragments[:STORE_NAME_SCAN_LIMIT]
        if 4 <= len(fragment.text) <= 40 and not _is_header_boilerplate(fragment.text)
    ]
    if not candidates:
        return UNKNOWN_STORE_NAME

    for candidate in candidates:
        if ALL_CAPS_STORE_NAME.match(candidate):
            return candidate
    for candidate in candidates:
        if TITLE_CASE_STORE_NAME.match(candidate):
            return candidate
    return candidates[0]


def _city_state_after(street: str, fragment_text: str, next_text: str | None) -> str | None:
    """City/state printed after the street, on the same fragment or the next one."""
    rest = fragment_text[fragment_text.find(street) + len(street) :]
    match = CITY_STATE_SAME_LINE.match(rest)
    if match is None and not rest.strip(" ,") and next_text is not None:
        match = CITY_STATE_LINE.fullmatch(next_text)
    if match is None:
        return None
    return match.group(1).strip().rstrip(",")


def extract_store_address(fragments: Sequence[TextFragment]) -> str | None:
    """Find the street address and, when printed next to it, the city/state line."""
    street = None
    street_index = -1
    for index, fragment in enumerate(fragments):
        match = STREET_ADDRESS_SEARCH.search(fragment.text)
        if match:
            street, street_index = match.group(0).strip(), index
            break

    if street is None:
        for index, fragment in enumerate(fragments[:HEADER_FRAGMENT_LIMIT]):
            match = BARE_ADDRESS_SEARCH.match(fragment.text)
            if match:
                street, street_index = match.group(0).strip(), index
                break

    if street is None:
        return None

    next_text = fragments[street_index + 1].text if street_index + 1 < len(fragments) else None
    city_state = _city_state_after(street, fragments[street_index].text, next_text)
    if city_state:
        return f"{street.rstrip(',')}, {city_state}"
    return street


def _parse_summary_amount(raw: str) -> Decimal:
    # A missing decimal point almost always means it was dropped by OCR ("596" -> 5.96)
    if "." not in raw:
        raw = f"{raw[:-2]}.{raw[-2:]}"
    return to_money(raw)


def extract_summary_amount(text: str, label: str) -> Decimal:
    """
    Extract one labelled amount ("total", "subtotal", "tax", "tip") from joined text.

    The last TOTAL wins because receipts often print an intermediate total
    before the final one; the other labels take their first occurrence.
    """
    pattern = SUMMARY_LABEL_PATTERNS[label]
    matches = list(pattern.finditer(text))
    if not matches:
        return Decimal("0.00")
    match = matches[-1] if label == "total" else matches[0]
    return _parse_summary_amount(match.group(1))


def extract_summary_amounts(text: str) -> SummaryAmounts:
    """Extract subtotal, tax, tip and total from the joined receipt text."""
    return SummaryAmounts(
        subtotal=extract_summary_amount(text, "subtotal"),
        tax=extract_summary_amount(text, "tax"),
        tip=extract_summary_amount(text, "tip"),
        total=extract_summary_amount(text, "total"),
    )


def detect_date_text(text: str) -> str | None:
    """Return the first date-looking substring (e.g. "03/14/24"), or None."""
    match = DATE_PATTERN.search(text)
    return match.group(0) if match else None
