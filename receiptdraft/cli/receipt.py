"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from receiptdraft.runtime import get_logger

logger = get_logger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server that parses recognizer output."""
    import uvicorn

    from receiptdraft.runtime import receipt_server as server

    print(f"Starting receipt draft server on {args.host}:{args.port}")
    print(f"Parse endpoint: http://{args.host}:{args.port}/parse")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)


def _load_blocks(path: Path) -> list[Any]:
    """
    Read a saved recognizer result.

    Accepts either a JSON list of blocks or an object with a "blocks" list.

    Raises:
        ValueError: If the file is not JSON or has neither shape.
    """
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        payload = payload.get("blocks")
    if not isinstance(payload, list):
        raise ValueError('expected a list of blocks or an object with a "blocks" list')
    return payload


def cmd_scan(args: argparse.Namespace) -> None:
    """Parse a saved recognizer result and print the draft for review."""
    from receiptdraft.application.receipts.scan import ReceiptScanRequest, run_receipt_scan
    from receiptdraft.receipt.formatter import draft_to_json, format_draft_for_review
    from receiptdraft.runtime import load_parser_rules

    ocr_path = Path(args.ocr_json)
    if not ocr_path.exists():
        print(f"Error: OCR result not found: {ocr_path}")
        sys.exit(1)

    try:
        blocks = _load_blocks(ocr_path)
    except ValueError as exc:
        logger.error("Invalid OCR result %s: %s", ocr_path, exc)
        print(f"Error: invalid OCR result {ocr_path}: {exc}")
        sys.exit(1)

    try:
        rules = load_parser_rules(args.rules)
    except (OSError, ValueError) as exc:
        logger.error("Invalid parser rules: %s", exc)
        print(f"Error: invalid parser rules: {exc}")
        sys.exit(1)

    result = run_receipt_scan(ReceiptScanRequest(blocks=blocks, rules=rules))

    if result.status == "ocr_unavailable":
        print("No recognized text in OCR result. Enter the receipt manually.")
        sys.exit(1)

    if result.status == "parse_failed":
        print(f"Parsing failed: {result.error}")
        print("Enter the receipt manually.")
        sys.exit(1)

    draft = result.review_draft
    if draft is None:
        print("Scan failed: missing draft output.")
        sys.exit(1)

    if args.json:
        print(draft_to_json(draft, result.warnings))
        return

    print("=" * 60)
    print("RECEIPT DRAFT")
    print("=" * 60)
    print(format_draft_for_review(draft, result.warnings))
    print("=" * 60)

    if result.status == "no_items":
        print("No items found. Add items manually before saving.")
