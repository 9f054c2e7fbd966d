"""Composable OCR receipt parser components."""

from .common import DEFAULT_PARSER_RULES, ParserRules, ParserRulesError, build_parser_rules
from .fields_parser import (
    SummaryAmounts,
    detect_date_text,
    extract_store_address,
    extract_store_name,
    extract_summary_amount,
    extract_summary_amounts,
)
from .fragments import preprocess_blocks
from .item_filter import ItemFilterContext, find_item_candidates, is_item_candidate, merge_adjacent_candidates
from .items_spatial_parser import ProximityMatcher, find_payment_section_start
from .items_text_parser import SequentialMatcher, extract_same_line_items
from .matching import ItemPriceMatcher, MatchedItem, order_matched_items
from .price_repair import PriceToken, collect_price_candidates, normalize_price_token, repair_price_text
from .reconcile import ReconciledTotals, reconcile_totals

__all__ = [
    "DEFAULT_PARSER_RULES",
    "ItemFilterContext",
    "ItemPriceMatcher",
    "MatchedItem",
    "ParserRules",
    "ParserRulesError",
    "PriceToken",
    "ProximityMatcher",
    "ReconciledTotals",
    "SequentialMatcher",
    "SummaryAmounts",
    "build_parser_rules",
    "collect_price_candidates",
    "detect_date_text",
    "extract_same_line_items",
    "extract_store_address",
    "extract_store_name",
    "extract_summary_amount",
    "extract_summary_amounts",
    "find_item_candidates",
    "find_payment_section_start",
    "is_item_candidate",
    "merge_adjacent_candidates",
    "normalize_price_token",
    "order_matched_items",
    "preprocess_blocks",
    "reconcile_totals",
    "repair_price_text",
]
