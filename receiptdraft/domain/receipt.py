"""Data models for receipt scanning."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Literal

OcrMethod = Literal["on-device", "manual"]

CENT = Decimal("0.01")


def to_money(value: Decimal | int | str) -> Decimal:
    """Quantize an amount to cents."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class TextFragment:
    """One line of recognized text with an approximate position on the page."""

    text: str
    vertical_position: float
    horizontal_position: float
    has_spatial_data: bool = False

    def __post_init__(self) -> None:
        cleaned = self.text.strip() if isinstance(self.text, str) else ""
        if not cleaned:
            raise ValueError("TextFragment text must be non-empty")
        object.__setattr__(self, "text", cleaned)


@dataclass(frozen=True)
class FragmentSet:
    """Ordered fragments plus whether any of them carries real geometry."""

    fragments: tuple[TextFragment, ...] = ()
    has_spatial_data: bool = False

    def __len__(self) -> int:
        return len(self.fragments)


@dataclass(frozen=True)
class PriceCandidate:
    """A fragment provisionally read as an item price."""

    source_fragment_index: int
    value: Decimal
    raw_text: str

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"PriceCandidate value must be non-negative, got {self.value}")


@dataclass(frozen=True)
class ItemCandidate:
    """A fragment (or two merged fragments) provisionally read as an item name."""

    source_fragment_index: int
    name: str

    def __post_init__(self) -> None:
        name = self.name.strip()
        if not 3 <= len(name) <= 50:
            raise ValueError(f"ItemCandidate name must be 3-50 chars: {name!r}")
        if sum(1 for c in name if c.isalpha()) < 3:
            raise ValueError(f"ItemCandidate name needs at least 3 letters: {name!r}")
        object.__setattr__(self, "name", name)


@dataclass
class ParsedLineItem:
    """A single line item on a receipt draft."""

    name: str
    total_price: Decimal
    quantity: int = 1

    def __post_init__(self) -> None:
        self.total_price = to_money(self.total_price)
        if self.total_price < 0:
            raise ValueError(f"Line item price must be non-negative, got {self.total_price}")
        if self.quantity < 1:
            raise ValueError(f"Line item quantity must be at least 1, got {self.quantity}")


@dataclass
class ReceiptWarning:
    """Parser warning attached to a nearby item position."""

    message: str
    # Insert warning after this item index when formatting. None means no anchor.
    after_item_index: int | None = None


@dataclass
class ReceiptDraft:
    """Structured receipt reconstructed from one scan, editable before saving."""

    store_name: str
    date: datetime
    store_address: str | None = None
    items: list[ParsedLineItem] = field(default_factory=list)
    subtotal: Decimal = Decimal("0.00")
    tax: Decimal = Decimal("0.00")
    tip: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    ocr_method: OcrMethod = "on-device"
    ocr_confidence: int = 0

    def __post_init__(self) -> None:
        for name in ("subtotal", "tax", "tip", "total"):
            amount = to_money(getattr(self, name))
            if amount < 0:
                raise ValueError(f"{name} must be non-negative, got {amount}")
            setattr(self, name, amount)
        if not 0 <= self.ocr_confidence <= 100:
            raise ValueError(f"ocr_confidence must be within 0-100, got {self.ocr_confidence}")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-serializable shape consumed by the review UI."""
        return {
            "storeName": self.store_name,
            "storeAddress": self.store_address,
            "date": self.date.isoformat(),
            "items": [
                {"name": item.name, "totalPrice": float(item.total_price), "quantity": item.quantity}
                for item in self.items
            ],
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "tip": float(self.tip),
            "total": float(self.total),
            "ocrMethod": self.ocr_method,
            "ocrConfidence": self.ocr_confidence,
        }
