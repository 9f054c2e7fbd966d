"""Format ReceiptDraft data for review output."""

import json
from collections.abc import Sequence
from decimal import Decimal

from receiptdraft.domain.receipt import ReceiptDraft, ReceiptWarning


def _format_rows_aligned(
    rows: list[tuple[str, str]],
    indent: str = "  ",
) -> list[str]:
    """
    Format (label, amount) rows with left-aligned labels and right-aligned amounts.

    Args:
        rows: List of (label, amount_text) tuples
        indent: Indentation prefix for each line

    Returns:
        List of formatted lines
    """
    if not rows:
        return []

    max_label_len = max(len(label) for label, _ in rows)
    max_amount_len = max(len(amount) for _, amount in rows)
    return [f"{indent}{label.ljust(max_label_len)}  {amount.rjust(max_amount_len)}" for label, amount in rows]


def _build_item_warning_map(
    warnings: Sequence[ReceiptWarning],
    item_count: int,
) -> dict[int, list[str]]:
    """Map item row indexes to parser warning strings; -1 anchors before the first item."""
    item_warnings: dict[int, list[str]] = {}
    for warning in warnings:
        if not warning.message:
            continue
        if not item_count:
            row_idx = -1
        elif warning.after_item_index is None:
            row_idx = item_count - 1
        else:
            row_idx = max(0, min(warning.after_item_index, item_count - 1))
        item_warnings.setdefault(row_idx, []).append(warning.message)
    return item_warnings


def _money(amount: Decimal) -> str:
    return f"{amount:.2f}"


def format_draft_for_review(draft: ReceiptDraft, warnings: Sequence[ReceiptWarning] = ()) -> str:
    """
    Render a draft as plain text for terminal review.

    Parser warnings are printed right after the item they are anchored to,
    prefixed with "! ".
    """
    lines = [
        f"Store:    {draft.store_name or '(none)'}",
        f"Address:  {draft.store_address or '(none)'}",
        f"Date:     {draft.date.strftime('%Y-%m-%d %H:%M')}",
        f"Method:   {draft.ocr_method} (confidence {draft.ocr_confidence}%)",
        "",
        f"Items ({len(draft.items)}):",
    ]

    item_rows = []
    for item in draft.items:
        label = item.name or "(unnamed)"
        if item.quantity > 1:
            label = f"{label} x{item.quantity}"
        item_rows.append((label, _money(item.total_price)))

    item_warnings = _build_item_warning_map(warnings, len(draft.items))
    for message in item_warnings.get(-1, []):
        lines.append(f"  ! {message}")
    for idx, row in enumerate(_format_rows_aligned(item_rows)):
        lines.append(row)
        for message in item_warnings.get(idx, []):
            lines.append(f"  ! {message}")

    lines.append("")
    lines.extend(
        _format_rows_aligned(
            [
                ("Subtotal", _money(draft.subtotal)),
                ("Tax", _money(draft.tax)),
                ("Tip", _money(draft.tip)),
                ("Total", _money(draft.total)),
            ],
            indent="",
        )
    )
    return "\n".join(lines)


def draft_to_json(draft: ReceiptDraft, warnings: Sequence[ReceiptWarning] = ()) -> str:
    """Serialize a draft (and its review warnings) as pretty-printed JSON."""
    payload = {
        "receipt": draft.to_dict(),
        "warnings": [warning.message for warning in warnings],
    }
    return json.dumps(payload, indent=2)
