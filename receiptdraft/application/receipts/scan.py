"""Receipt scan workflow orchestration."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal

from receiptdraft.receipt.ocr_result_parser import is_error_draft, parse_receipt
from receiptdraft.receipt.review import create_manual_draft
from receiptdraft.runtime import get_logger

if TYPE_CHECKING:
    from receiptdraft.domain.receipt import ReceiptDraft, ReceiptWarning
    from receiptdraft.receipt.ocr_parser.common import ParserRules

logger = get_logger(__name__)

ScanStatus = Literal[
    "ocr_unavailable",
    "parse_failed",
    "no_items",
    "parsed",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    # None when the recognizer was not available at all
    blocks: Sequence[Mapping[str, Any] | str] | None
    rules: ParserRules | None = None
    now: datetime | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    draft: ReceiptDraft | None = None
    # Offered whenever the parsed draft is missing or unusable
    manual_draft: ReceiptDraft | None = None
    warnings: list[ReceiptWarning] = field(default_factory=list)
    error: str | None = None

    @property
    def review_draft(self) -> ReceiptDraft | None:
        """Draft to show for review: the parsed one when usable, else the manual one."""
        if self.status in ("parsed", "no_items") and self.draft is not None:
            return self.draft
        return self.manual_draft


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: recognizer blocks -> parse -> classify outcome."""
    if not request.blocks:
        logger.warning("No recognizer output; offering manual entry")
        return ReceiptScanResult(
            status="ocr_unavailable",
            manual_draft=create_manual_draft(request.now),
            error="Text recognition is not available",
        )

    warnings: list[ReceiptWarning] = []
    draft = parse_receipt(request.blocks, rules=request.rules, now=request.now, warning_sink=warnings)

    if is_error_draft(draft):
        error = warnings[-1].message if warnings else "receipt parsing failed"
        logger.error("Failed to parse receipt: %s", error)
        return ReceiptScanResult(
            status="parse_failed",
            draft=draft,
            manual_draft=create_manual_draft(request.now),
            warnings=warnings,
            error=error,
        )

    if not draft.items:
        logger.info("No items found on receipt from %s", draft.store_name)
        return ReceiptScanResult(
            status="no_items",
            draft=draft,
            manual_draft=create_manual_draft(request.now),
            warnings=warnings,
        )

    logger.info(
        "Parsed receipt: %s, %d items, total %s (confidence %d)",
        draft.store_name,
        len(draft.items),
        draft.total,
        draft.ocr_confidence,
    )
    for warning in warnings:
        logger.debug("Parser warning: %s", warning.message)
    return ReceiptScanResult(status="parsed", draft=draft, warnings=warnings)
