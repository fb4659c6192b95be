"""Receipt scan workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from billscan.receipt.ocr_result_parser import parse_receipt
from billscan.runtime.logging import get_logger
from billscan.runtime.receipt_pipeline import (
    PROGRESS_COMPLETE,
    ProgressCallback,
    ProgressReporter,
    RecognitionFailure,
    call_ocr_service,
)

if TYPE_CHECKING:
    import httpx

    from billscan.domain.receipt import LineItem
    from billscan.receipt.ocr_parser.common import ExtractionConfig

logger = get_logger(__name__)

ScanStatus = Literal[
    "file_not_found",
    "recognition_failed",
    "no_items",
    "items_found",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image_path: Path
    ocr_url: str
    config: ExtractionConfig | None = None
    on_progress: ProgressCallback | None = None
    client: httpx.Client | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow.

    ``items`` is complete or empty; a failed run never carries partial items.
    """

    status: ScanStatus
    items: list[LineItem] = field(default_factory=list)
    strategy: str = "none"
    raw_text: str = ""
    error: str | None = None


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: preprocess -> OCR -> extract -> dedupe."""
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    progress = ProgressReporter(request.on_progress)
    try:
        _, ocr_result = call_ocr_service(
            request.image_path.read_bytes(),
            request.ocr_url,
            filename=f"{request.image_path.stem}.png",
            config=request.config,
            progress=progress,
            client=request.client,
        )
    except RecognitionFailure as exc:
        return ReceiptScanResult(
            status="recognition_failed",
            error=str(exc),
        )

    result = parse_receipt(ocr_result, config=request.config)
    progress.report(PROGRESS_COMPLETE)

    if result.is_empty:
        logger.info("Recognition succeeded but no items were found in %s", request.image_path.name)
        return ReceiptScanResult(status="no_items", strategy=result.strategy, raw_text=result.raw_text)

    return ReceiptScanResult(
        status="items_found",
        items=result.items,
        strategy=result.strategy,
        raw_text=result.raw_text,
    )
