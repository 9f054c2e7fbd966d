"""Core domain models for receipt drafts.

This module provides the records shared by the parser and its callers:
- TextFragment, FragmentSet: recognized text with positions
- PriceCandidate, ItemCandidate: provisional classifications
- ParsedLineItem, ReceiptDraft: the structured result

Usage:
    from receiptdraft.domain import ReceiptDraft, ParsedLineItem
"""

from receiptdraft.domain.receipt import (
    FragmentSet,
    ItemCandidate,
    OcrMethod,
    ParsedLineItem,
    PriceCandidate,
    ReceiptDraft,
    ReceiptWarning,
    TextFragment,
    to_money,
)

__all__ = [
    "FragmentSet",
    "ItemCandidate",
    "OcrMethod",
    "ParsedLineItem",
    "PriceCandidate",
    "ReceiptDraft",
    "ReceiptWarning",
    "TextFragment",
    "to_money",
]
