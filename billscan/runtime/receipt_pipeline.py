"""Runtime helpers for the receipt OCR pipeline (non-HTTP-server)."""

import json
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx

from billscan.domain.receipt import OcrResult
from billscan.receipt.ocr_helpers import preprocess_image_bytes, transform_ocr_result
from billscan.receipt.ocr_parser.common import ExtractionConfig
from billscan.runtime.logging import get_logger

logger = get_logger(__name__)

OCR_TIMEOUT_SECONDS = 60.0

ProgressCallback = Callable[[int], None]

# Progress checkpoints reported during one scan.
PROGRESS_START = 0
PROGRESS_IMAGE_READY = 20
PROGRESS_OCR_DONE = 90
PROGRESS_COMPLETE = 100


class RecognitionFailure(RuntimeError):
    """Raised when the OCR collaborator cannot process the image at all."""


class ProgressReporter:
    """Forward progress percentages, clamped to 0..100 and never decreasing."""

    def __init__(self, callback: ProgressCallback | None = None) -> None:
        self._callback = callback
        self.last: int | None = None

    def report(self, percent: int) -> None:
        percent = max(0, min(100, int(percent)))
        if self.last is not None and percent < self.last:
            percent = self.last
        if percent == self.last:
            return
        self.last = percent
        if self._callback is not None:
            self._callback(percent)


def prepare_image(image_bytes: bytes, config: ExtractionConfig) -> bytes:
    """Preprocess image bytes for OCR, mapping undecodable input to RecognitionFailure."""
    from PIL import UnidentifiedImageError

    try:
        return preprocess_image_bytes(image_bytes, scale=config.upscale, contrast=config.contrast)
    except (UnidentifiedImageError, OSError) as e:
        logger.error("Could not decode receipt image: %s", e)
        raise RecognitionFailure(f"Unreadable image: {e}") from e


def _decode_ocr_response(response: httpx.Response) -> dict[str, Any]:
    if response.status_code != 200:
        # Response body can carry recognized receipt text; log only the status.
        logger.error("OCR service error: %s", response.status_code)
        raise RecognitionFailure(f"OCR service error: {response.status_code}")

    try:
        raw_result = response.json()
    except ValueError as e:
        raise RecognitionFailure("OCR service returned invalid JSON") from e

    if not isinstance(raw_result, dict):
        raise RecognitionFailure("OCR service returned an unexpected payload")
    if raw_result.get("status") == "error":
        message = raw_result.get("message") or "recognition failed"
        raise RecognitionFailure(f"OCR service could not read the image: {message}")
    return raw_result


def _normalize_ocr_result(raw_result: dict[str, Any], config: ExtractionConfig) -> OcrResult:
    try:
        return transform_ocr_result(
            raw_result, min_confidence=config.min_token_confidence, line_tolerance=config.line_tolerance
        )
    except ValueError as e:
        logger.error("OCR service returned a malformed result: %s", e)
        raise RecognitionFailure("OCR service returned a malformed result") from e


def call_ocr_service(
    image_bytes: bytes,
    ocr_url: str,
    *,
    filename: str = "receipt.png",
    config: ExtractionConfig | None = None,
    progress: ProgressReporter | None = None,
    client: httpx.Client | None = None,
) -> tuple[dict[str, Any], OcrResult]:
    """
    Preprocess the image, call the OCR service and normalize its answer.

    Returns:
        Tuple of (raw_result, transformed_result).

    Raises:
        RecognitionFailure: image unreadable or OCR service failed. Not retried.
    """
    if config is None:
        config = ExtractionConfig()
    if progress is None:
        progress = ProgressReporter()

    progress.report(PROGRESS_START)
    prepared = prepare_image(image_bytes, config)
    progress.report(PROGRESS_IMAGE_READY)

    ocr_url = ocr_url.rstrip("/")
    logger.info("Sending receipt to OCR service at %s...", ocr_url)
    files = {"file": (filename, prepared, "image/png")}
    try:
        start_time = time.time()
        if client is None:
            response = httpx.post(f"{ocr_url}/ocr", files=files, timeout=OCR_TIMEOUT_SECONDS)
        else:
            response = client.post(f"{ocr_url}/ocr", files=files, timeout=OCR_TIMEOUT_SECONDS)
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise RecognitionFailure(f"Failed to connect to OCR service: {e}") from e

    raw_result = _decode_ocr_response(response)
    progress.report(PROGRESS_OCR_DONE)
    return raw_result, _normalize_ocr_result(raw_result, config)


async def call_ocr_service_async(
    image_bytes: bytes,
    ocr_url: str,
    *,
    filename: str = "receipt.png",
    config: ExtractionConfig | None = None,
    client: httpx.AsyncClient | None = None,
) -> tuple[dict[str, Any], OcrResult]:
    """Async variant of call_ocr_service for the upload server."""
    if config is None:
        config = ExtractionConfig()

    prepared = prepare_image(image_bytes, config)
    ocr_url = ocr_url.rstrip("/")
    files = {"file": (filename, prepared, "image/png")}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=OCR_TIMEOUT_SECONDS) as own_client:
                response = await own_client.post(f"{ocr_url}/ocr", files=files)
        else:
            response = await client.post(f"{ocr_url}/ocr", files=files)
    except httpx.RequestError as e:
        logger.error("OCR service unavailable: %s", e)
        raise RecognitionFailure(f"Failed to connect to OCR service: {e}") from e

    raw_result = _decode_ocr_response(response)
    return raw_result, _normalize_ocr_result(raw_result, config)


def load_ocr_json(json_path: Path, config: ExtractionConfig | None = None) -> OcrResult:
    """Load a saved OCR service response and normalize it."""
    if config is None:
        config = ExtractionConfig()
    raw_result = json.loads(json_path.read_text(encoding="utf-8"))
    if not isinstance(raw_result, dict):
        raise ValueError(f"Unexpected OCR JSON payload in {json_path}")
    return transform_ocr_result(
        raw_result, min_confidence=config.min_token_confidence, line_tolerance=config.line_tolerance
    )
