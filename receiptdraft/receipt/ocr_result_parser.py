"""Parse recognizer text blocks into a structured ReceiptDraft."""

from collections.abc import Mapping, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from receiptdraft.domain.receipt import ReceiptDraft, ReceiptWarning

from .ocr_parser.common import (
    DEFAULT_PARSER_RULES,
    ERROR_STORE_NAME,
    TOTAL_TOLERANCE,
    UNKNOWN_STORE_NAME,
    ParserRules,
)
from .ocr_parser.fields_parser import (
    SummaryAmounts,
    extract_store_address,
    extract_store_name,
    extract_summary_amounts,
)
from .ocr_parser.fragments import preprocess_blocks
from .ocr_parser.item_filter import ItemFilterContext
from .ocr_parser.items_spatial_parser import ProximityMatcher
from .ocr_parser.items_text_parser import SequentialMatcher, extract_same_line_items
from .ocr_parser.matching import ItemPriceMatcher, order_matched_items
from .ocr_parser.reconcile import ReconciledTotals, reconcile_totals

# Confidence heuristic weights (0-100 scale)
BASE_CONFIDENCE = 40
ITEMS_FOUND_BONUS = 20
AGREEMENT_BONUS = 10


def select_matcher(has_spatial_data: bool, rules: ParserRules = DEFAULT_PARSER_RULES) -> ItemPriceMatcher:
    """Proximity pairing when the recognizer gave geometry, positional pairing otherwise."""
    if has_spatial_data:
        return ProximityMatcher(rules)
    return SequentialMatcher(rules)


def estimate_confidence(
    store_name: str,
    item_count: int,
    item_sum: Decimal,
    ocr_amounts: SummaryAmounts,
    totals: ReconciledTotals,
) -> int:
    """Score how much of the receipt was read consistently."""
    score = BASE_CONFIDENCE
    if item_count:
        score += ITEMS_FOUND_BONUS
    if store_name != UNKNOWN_STORE_NAME:
        score += AGREEMENT_BONUS
    if ocr_amounts.subtotal > 0 and abs(ocr_amounts.subtotal - item_sum) <= TOTAL_TOLERANCE:
        score += AGREEMENT_BONUS
    if ocr_amounts.total > 0 and abs(ocr_amounts.total - totals.total) <= TOTAL_TOLERANCE:
        score += AGREEMENT_BONUS
    if ocr_amounts.tax > 0:
        score += AGREEMENT_BONUS
    return min(score, 100)


def error_draft(now: datetime) -> ReceiptDraft:
    """Sentinel draft returned when parsing fails outright."""
    return ReceiptDraft(store_name=ERROR_STORE_NAME, date=now, ocr_confidence=0)


def is_error_draft(draft: ReceiptDraft) -> bool:
    return draft.store_name == ERROR_STORE_NAME and not draft.items and draft.ocr_confidence == 0


def _parse_blocks(
    blocks: Sequence[Mapping[str, Any] | str] | None,
    rules: ParserRules,
    now: datetime,
    warnings: list[ReceiptWarning],
) -> ReceiptDraft:
    fragment_set = preprocess_blocks(blocks)
    fragments = fragment_set.fragments

    store_name = extract_store_name(fragments)
    store_address = extract_store_address(fragments)
    ocr_amounts = extract_summary_amounts("\n".join(fragment.text for fragment in fragments))

    context = ItemFilterContext(store_name=store_name, store_address=store_address)
    consumed: set[int] = set()
    matched = extract_same_line_items(fragments, context, consumed, rules)
    matcher = select_matcher(fragment_set.has_spatial_data, rules)
    matched.extend(matcher.match(fragments, context, consumed, warning_sink=warnings))

    items = [entry.item for entry in order_matched_items(matched)]
    item_sum = sum((item.total_price for item in items), Decimal("0.00"))
    totals = reconcile_totals(items, ocr_amounts.subtotal, ocr_amounts.tax, ocr_amounts.tip, ocr_amounts.total)

    return ReceiptDraft(
        store_name=store_name,
        store_address=store_address,
        date=now,
        items=items,
        subtotal=totals.subtotal,
        tax=totals.tax,
        tip=totals.tip,
        total=totals.total,
        ocr_method="on-device",
        ocr_confidence=estimate_confidence(store_name, len(items), item_sum, ocr_amounts, totals),
    )


def parse_receipt(
    blocks: Sequence[Mapping[str, Any] | str] | None,
    *,
    rules: ParserRules | None = None,
    now: datetime | None = None,
    warning_sink: list[ReceiptWarning] | None = None,
) -> ReceiptDraft:
    """
    Parse recognizer blocks into a ReceiptDraft.

    This is a best-effort parser - results should be manually reviewed.
    The printed receipt date is not read; the draft is dated ``now``.

    Args:
        blocks: Ordered recognizer blocks ``{"text": ..., "boundingBox": {...}}``
            or bare strings.
        rules: Parser keyword lists and thresholds; defaults when omitted.
        now: Clock value used as the draft date.
        warning_sink: Optional list that receives review hints.

    Returns:
        The parsed draft, or the error draft (see ``is_error_draft``) when
        parsing raised. An empty item list is a valid result.
    """
    now = now or datetime.now()
    warnings: list[ReceiptWarning] = []
    try:
        draft = _parse_blocks(blocks, rules or DEFAULT_PARSER_RULES, now, warnings)
    except Exception as exc:
        warnings.append(ReceiptWarning(message=f"receipt parsing failed: {exc}"))
        draft = error_draft(now)
    if warning_sink is not None:
        warning_sink.extend(warnings)
    return draft
