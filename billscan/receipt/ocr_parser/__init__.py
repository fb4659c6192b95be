"""Composable OCR receipt parser components."""

from .common import (
    DEFAULT_STOP_TERMS,
    ExtractionConfig,
    has_minimum_letter_content,
    is_amount_like,
    is_header_noise,
    is_noise_line,
    normalize_amount,
)
from .dedupe import finalize_items, merge_duplicate_items
from .items_spatial_parser import PriceColumn, _extract_items_with_bbox, decompose_name_quantity, locate_price_column
from .items_text_parser import _extract_items
from .line_grouping import group_tokens_into_lines

__all__ = [
    "DEFAULT_STOP_TERMS",
    "ExtractionConfig",
    "PriceColumn",
    "_extract_items",
    "_extract_items_with_bbox",
    "decompose_name_quantity",
    "finalize_items",
    "group_tokens_into_lines",
    "has_minimum_letter_content",
    "is_amount_like",
    "is_header_noise",
    "is_noise_line",
    "locate_price_column",
    "merge_duplicate_items",
    "normalize_amount",
]
