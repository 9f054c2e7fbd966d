"""FastAPI server that turns recognizer text blocks into receipt drafts."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from receiptdraft.domain.receipt import ReceiptWarning
from receiptdraft.receipt.ocr_result_parser import is_error_draft, parse_receipt
from receiptdraft.receipt.review import create_manual_draft
from receiptdraft.runtime.logging import get_logger
from receiptdraft.runtime.parser_rules import load_parser_rules

logger = get_logger(__name__)


def _error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load parser rules once on startup so a malformed rules file fails fast."""
    rules = load_parser_rules()
    logger.info("Parser rules loaded (%d exclusion keywords)", len(rules.exclusion_keywords))
    yield


app = FastAPI(title="Receipt Draft Parser", lifespan=lifespan)


@app.post("/parse")
async def parse_blocks(request: Request) -> JSONResponse:
    """Parse recognizer blocks posted as {"blocks": [...]} into a draft."""
    try:
        payload: Any = await request.json()
    except ValueError:
        return _error("Request body must be JSON")

    if not isinstance(payload, dict) or not isinstance(payload.get("blocks"), list):
        return _error('Request body must be an object with a "blocks" list')

    blocks = payload["blocks"]
    if not blocks:
        return JSONResponse(
            {
                "status": "ocr_unavailable",
                "receipt": create_manual_draft().to_dict(),
                "warnings": [],
                "message": "No recognized text; enter the receipt manually",
            }
        )

    warnings: list[ReceiptWarning] = []
    draft = parse_receipt(blocks, rules=load_parser_rules(), warning_sink=warnings)
    if is_error_draft(draft):
        status = "parse_failed"
        logger.error("Failed to parse posted blocks: %s", warnings[-1].message if warnings else "unknown error")
        draft = create_manual_draft()
    elif not draft.items:
        status = "no_items"
    else:
        status = "success"
    logger.debug("Parse status %s for %d blocks", status, len(blocks))

    return JSONResponse(
        {
            "status": status,
            "receipt": draft.to_dict(),
            "warnings": [warning.message for warning in warnings],
        }
    )


@app.post("/manual")
async def manual_draft() -> dict[str, Any]:
    """Blank draft for manual entry."""
    return {"status": "success", "receipt": create_manual_draft().to_dict(), "warnings": []}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
