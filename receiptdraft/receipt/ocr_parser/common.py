"""Shared constants and helpers for OCR receipt parsing."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any

# Fragment positioning
SYNTHETIC_VERTICAL_STEP = 20
SYNTHETIC_HORIZONTAL_STEP = 10
LINE_VERTICAL_OFFSET = 15

# Classifier windows
STORE_NAME_SCAN_LIMIT = 10
HEADER_FRAGMENT_LIMIT = 15

# Price plausibility
SEQUENTIAL_PRICE_CEILING = Decimal("50")
PROXIMITY_PRICE_CEILING = Decimal("100")
MIN_PRICE_EXCLUSIVE = Decimal("0.01")
SAME_LINE_MIN_PRICE = Decimal("0.05")
SAME_LINE_MAX_PRICE = Decimal("1000")

# Proximity matching
MAX_PROXIMITY_DISTANCE = 50.0
HORIZONTAL_DISTANCE_WEIGHT = 0.1
RIGHT_OF_PRICE_PENALTY = 5.0

# Reconciliation
TOTAL_TOLERANCE = Decimal("1.00")

UNKNOWN_STORE_NAME = "Unknown Store"
ERROR_STORE_NAME = "Error parsing receipt"

STREET_SUFFIXES = (
    "street|st|avenue|ave|road|rd|boulevard|blvd|drive|dr|lane|ln|way|court|ct|"
    "place|pl|highway|hwy|parkway|pkwy|circle|cir|terrace|ter|plaza|plz"
)
STREET_SUFFIX_WORD = re.compile(rf"\b({STREET_SUFFIXES})\b\.?", re.IGNORECASE)

# Receipt boilerplate seen in the header block (never a store name)
DATE_PATTERN = re.compile(r"\d{1,2}[/-]\d{1,2}[/-]\d{2,4}")
TIME_PATTERN = re.compile(r"\b\d{1,2}:\d{2}(:\d{2})?\s*([AaPp][Mm])?\b")
PHONE_PATTERN = re.compile(r"\(?\b\d{3}\)?[\s.-]?\d{3}[\s.-]\d{4}\b")
CASHIER_PATTERN = re.compile(
    r"\b(cashier|register|terminal|operator|clerk|server|transaction)\b"
    r"|\b(lane|reg|term|trans|tran|till)\b\s*[#:]?\s*\d",
    re.IGNORECASE,
)
PURE_NUMERIC_PATTERN = re.compile(r"^[\d\s\-./:#$,*]+$")
STATE_ZIP_PATTERN = re.compile(r"\b[A-Z]{2}\s+\d{5}(-\d{4})?\b")
STREET_ADDRESS_PATTERN = re.compile(rf"^\d+\s+.*\b({STREET_SUFFIXES})\b", re.IGNORECASE)
CITY_STATE_ZIP_PATTERN = re.compile(r"^[A-Za-z][A-Za-z .'-]*,\s*[A-Z]{2}\b(\s+\d{5}(-\d{4})?)?")
PRICE_IN_TEXT_PATTERN = re.compile(r"\$?\d+\.\d{2}\b")

# Summary/tender lines; these carry amounts that are never item prices
SUMMARY_PATTERNS = re.compile(
    r"\b(sub\s*-?\s*total|total|tax|balance|change|tip|gratuity|amount\s+due|tender(ed)?)\b",
    re.IGNORECASE,
)

# Keywords that end the item section (compared with and without inner spaces)
END_OF_ITEMS_KEYWORDS = ("tax:", "total", "balance", "subtotal")

# Case-insensitive substrings that disqualify an item-name candidate
DEFAULT_EXCLUSION_KEYWORDS = (
    # Payment methods / tender
    "visa",
    "mastercard",
    "master card",
    "amex",
    "american express",
    "discover",
    "debit",
    "credit",
    "tender",
    "change due",
    "payment",
    "approved",
    "approval",
    "auth code",
    "authorization",
    "contactless",
    "apple pay",
    "google pay",
    "card #",
    "acct",
    # Totals / tax
    "total",
    "subtotal",
    "tax",
    "balance",
    "amount due",
    "you saved",
    "savings",
    "gratuity",
    "tip:",
    # Address / calendar words
    "street",
    "avenue",
    "blvd",
    "boulevard",
    "suite",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
    # Transaction metadata
    "cashier",
    "register",
    "terminal",
    "transaction",
    "receipt",
    "invoice",
    "order #",
    "store #",
    "thank you",
    "thanks for",
    "welcome",
    "survey",
    "www.",
    ".com",
    "items sold",
    "item count",
    "ref #",
    "reference",
    "merchant",
    "customer copy",
)

# Words that make up drink/food modifier phrases ("Extra Hot", "Iced")
DEFAULT_MODIFIER_WORDS = (
    "extra",
    "hot",
    "iced",
    "ice",
    "large",
    "medium",
    "small",
    "regular",
    "light",
    "lite",
    "no",
    "add",
    "with",
    "decaf",
    "double",
    "single",
    "shot",
    "sweet",
    "whip",
    "whipped",
    "tall",
    "grande",
    "venti",
    "oat",
    "soy",
    "almond",
)

DEFAULT_CARD_BRANDS = (
    "visa",
    "mastercard",
    "master card",
    "amex",
    "american express",
    "discover",
)

# Noise patterns for item candidates
ITEM_NOISE_PATTERNS = (
    re.compile(r"^[$S]?\s*\d+[.,]\d{2}\s*[A-Za-z]?$"),  # pure price
    re.compile(r"\d+(\.\d+)?\s*%"),  # percent
    re.compile(r"\*{2,}\s*\d+|[Xx]{4,}\d*"),  # masked card / asterisk serial
    re.compile(r"^\d{3,}(?:[\s-]+\d+)*(?:\s+[A-Za-z]{1,2})?$"),  # numeric code
    re.compile(r"^[A-Za-z][A-Za-z #.]{1,20}:\s*\S*"),  # field label "Cashier: Ann"
    re.compile(r"^[A-Za-z][A-Za-z .'-]*,\s*[A-Z]{2}\b"),  # city, ST
    re.compile(r"\b\d{5}(-\d{4})?\b"),  # zip
    PHONE_PATTERN,
    re.compile(r"#\s*\d+"),  # store location "Greenville #1005"
    re.compile(
        r"\b(member(ship)?|rewards?|loyalty|club\s*card)\b\s*(#|no\.?|number|id)?\s*:?\s*[\dXx*]{4,}",
        re.IGNORECASE,
    ),
)

HEADER_ADDRESS_NUMBER_PATTERN = re.compile(r"^(\d+)\s")
HEADER_ADDRESS_WORDS_PATTERN = re.compile(r"^\d+\s+[A-Z][a-z]+")

APOSTROPHE_PATTERN = re.compile(r"['‘’`´]")


class ParserRulesError(ValueError):
    """Raised when a parser rules mapping has an invalid shape."""


@dataclass(frozen=True)
class ParserRules:
    """Tunable keyword lists and thresholds, passed explicitly through the parser."""

    exclusion_keywords: tuple[str, ...] = DEFAULT_EXCLUSION_KEYWORDS
    modifier_words: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_MODIFIER_WORDS))
    card_brands: tuple[str, ...] = DEFAULT_CARD_BRANDS
    sequential_price_ceiling: Decimal = SEQUENTIAL_PRICE_CEILING
    proximity_price_ceiling: Decimal = PROXIMITY_PRICE_CEILING
    max_proximity_distance: float = MAX_PROXIMITY_DISTANCE


DEFAULT_PARSER_RULES = ParserRules()


def _string_list(section: Mapping[str, Any], key: str) -> tuple[str, ...]:
    raw = section.get(key, [])
    if not isinstance(raw, list) or not all(isinstance(entry, str) for entry in raw):
        raise ParserRulesError(f"'{key}' must be a list of strings")
    return tuple(entry.strip().lower() for entry in raw if entry.strip())


def _decimal_value(section: Mapping[str, Any], key: str, default: Decimal) -> Decimal:
    if key not in section:
        return default
    try:
        value = Decimal(str(section[key]))
    except InvalidOperation as exc:
        raise ParserRulesError(f"'{key}' must be a number") from exc
    if value <= 0:
        raise ParserRulesError(f"'{key}' must be positive")
    return value


def build_parser_rules(config: Mapping[str, Any] | None = None) -> ParserRules:
    """
    Build parser rules from a parsed rules mapping (e.g. loaded from TOML).

    Recognized shape:
        [item_filter]
        extra_exclusion_keywords = ["..."]
        extra_modifier_words = ["..."]

        [matching]
        extra_card_brands = ["..."]
        sequential_price_ceiling = 50
        proximity_price_ceiling = 100
        max_proximity_distance = 50

    Lists extend the built-in defaults; scalars replace them.
    """
    if not config:
        return DEFAULT_PARSER_RULES

    item_filter = config.get("item_filter", {})
    matching = config.get("matching", {})
    if not isinstance(item_filter, Mapping) or not isinstance(matching, Mapping):
        raise ParserRulesError("'item_filter' and 'matching' must be tables")

    rules = DEFAULT_PARSER_RULES
    return replace(
        rules,
        exclusion_keywords=rules.exclusion_keywords + _string_list(item_filter, "extra_exclusion_keywords"),
        modifier_words=rules.modifier_words | frozenset(_string_list(item_filter, "extra_modifier_words")),
        card_brands=rules.card_brands + _string_list(matching, "extra_card_brands"),
        sequential_price_ceiling=_decimal_value(matching, "sequential_price_ceiling", rules.sequential_price_ceiling),
        proximity_price_ceiling=_decimal_value(matching, "proximity_price_ceiling", rules.proximity_price_ceiling),
        max_proximity_distance=float(
            _decimal_value(matching, "max_proximity_distance", Decimal(str(rules.max_proximity_distance)))
        ),
    )


def _normalize_for_comparison(text: str) -> str:
    """Casefold, drop apostrophe variants and collapse whitespace."""
    without_apostrophes = APOSTROPHE_PATTERN.sub("", text)
    return re.sub(r"\s+", " ", without_apostrophes).strip().casefold()


def _looks_like_summary_line(text: str) -> bool:
    """Return True if text appears to be a summary/tax/tender line."""
    if not text:
        return False
    return SUMMARY_PATTERNS.search(text) is not None


def _is_end_of_items_marker(text: str) -> bool:
    """Return True if the fragment starts the totals block (OCR may insert spaces)."""
    lowered = text.lower()
    compact = re.sub(r"\s+", "", lowered)
    return any(keyword in lowered or keyword in compact for keyword in END_OF_ITEMS_KEYWORDS)


def _alpha_count(text: str) -> int:
    return sum(1 for c in text if c.isalpha())
