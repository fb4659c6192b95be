"""Pure domain models."""

from billscan.domain.receipt import (
    CandidateItem,
    ExtractionResult,
    ExtractionStrategy,
    Line,
    LineItem,
    OcrResult,
    Token,
)

__all__ = [
    "CandidateItem",
    "ExtractionResult",
    "ExtractionStrategy",
    "Line",
    "LineItem",
    "OcrResult",
    "Token",
]
