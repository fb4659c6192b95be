"""Data models for receipt line-item extraction."""

from dataclasses import dataclass, field
from typing import Literal

ExtractionStrategy = Literal["geometric", "flat_text", "none"]


@dataclass(frozen=True)
class Token:
    """A single OCR-recognized word and its pixel bounding box."""

    text: str
    x0: float
    x1: float
    y0: float
    y1: float
    confidence: float = 1.0

    @property
    def y_center(self) -> float:
        return (self.y0 + self.y1) / 2

    @property
    def x_center(self) -> float:
        return (self.x0 + self.x1) / 2


@dataclass
class Line:
    """Tokens printed on one text row, ordered left to right once grouped."""

    # Center of the token that opened the line; not a running average.
    y_center: float
    tokens: list[Token] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(token.text for token in self.tokens).strip()


@dataclass
class CandidateItem:
    """Result of parsing one receipt line, before deduplication."""

    name: str
    price: int
    quantity: int = 1


@dataclass
class LineItem:
    """Accepted, deduplicated line item handed to the caller for review."""

    id: int
    name: str
    qty: int
    price: int

    @property
    def line_total(self) -> int:
        # Display only; settlement arithmetic happens downstream.
        return self.qty * self.price

    def to_dict(self) -> dict[str, int | str]:
        return {"id": self.id, "name": self.name, "qty": self.qty, "price": self.price}


@dataclass
class OcrResult:
    """Normalized OCR collaborator output: positioned tokens plus the text blob."""

    tokens: list[Token] = field(default_factory=list)
    full_text: str = ""

    @property
    def has_geometry(self) -> bool:
        return bool(self.tokens)


@dataclass
class ExtractionResult:
    """Outcome of one extraction run.

    An empty ``items`` list means recognition worked but nothing looked like a
    purchased item. That is a valid result, not a failure.
    """

    items: list[LineItem] = field(default_factory=list)
    strategy: ExtractionStrategy = "none"
    raw_text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.items
