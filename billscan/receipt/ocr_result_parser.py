"""Turn a normalized OCR result into reviewed-ready receipt line items."""

import logging

from billscan.domain.receipt import CandidateItem, ExtractionResult, ExtractionStrategy, OcrResult

from .ocr_parser import ExtractionConfig, _extract_items, _extract_items_with_bbox, finalize_items

logger = logging.getLogger(__name__)


def parse_receipt(ocr_result: OcrResult, config: ExtractionConfig | None = None) -> ExtractionResult:
    """
    Parse an OCR result into deduplicated line items.

    This is a best-effort parser tuned for precision - results should be
    reviewed by a person before use.

    Token geometry is used when present. The flat-text parser runs when there
    are no tokens, or when the spatial pass found no items.

    Args:
        ocr_result: Tokens and text blob from the OCR collaborator
        config: Extraction settings; defaults apply when omitted

    Returns:
        ExtractionResult; ``is_empty`` is True when nothing looked like an item
    """
    if config is None:
        config = ExtractionConfig()

    candidates: list[CandidateItem] = []
    strategy: ExtractionStrategy = "none"

    if ocr_result.has_geometry:
        candidates = _extract_items_with_bbox(ocr_result.tokens, config)
        if candidates:
            strategy = "geometric"
        else:
            logger.debug("Spatial pass over %d tokens found no items", len(ocr_result.tokens))

    if not candidates and ocr_result.full_text.strip():
        candidates = _extract_items(ocr_result.full_text, config)
        if candidates:
            strategy = "flat_text"

    items = finalize_items(candidates)
    logger.debug("Extracted %d items (%d candidates) via %s", len(items), len(candidates), strategy)

    return ExtractionResult(items=items, strategy=strategy, raw_text=ocr_result.full_text)
