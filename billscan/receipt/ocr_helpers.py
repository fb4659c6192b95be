"""Pure OCR transformation helpers: image preparation and result normalization."""

import io
from typing import Any

from billscan.domain.receipt import OcrResult, Token

from .ocr_parser.common import DEFAULT_CONTRAST, DEFAULT_LINE_TOLERANCE, DEFAULT_MIN_TOKEN_CONFIDENCE, DEFAULT_UPSCALE
from .ocr_parser.line_grouping import group_tokens_into_lines

# ITU-R BT.709 luma weights, as a PIL RGB -> L conversion matrix.
BT709_LUMA_MATRIX = (0.2126, 0.7152, 0.0722, 0.0)
CONTRAST_MIDPOINT = 128


def _contrast_lut(contrast: float) -> list[int]:
    """Lookup table for ``(v - 128) * k + 128`` clamped to 0..255."""
    return [
        max(0, min(255, round((value - CONTRAST_MIDPOINT) * contrast + CONTRAST_MIDPOINT))) for value in range(256)
    ]


def preprocess_image(img: Any, scale: float = DEFAULT_UPSCALE, contrast: float = DEFAULT_CONTRAST) -> Any:
    """
    Upscale, grayscale and contrast-stretch a receipt photo before OCR.

    Small receipt fonts read better slightly enlarged. Luminance uses BT.709
    weights and the result keeps three (equal) channels.

    Args:
        img: PIL image in any mode
        scale: Factor applied to both dimensions
        contrast: Linear stretch around mid-gray

    Returns:
        New RGB PIL image
    """
    from PIL import Image

    rgb = img.convert("RGB")
    width, height = rgb.size
    new_size = (max(1, round(width * scale)), max(1, round(height * scale)))
    resized = rgb.resize(new_size, Image.Resampling.BILINEAR)

    luminance = resized.convert("L", BT709_LUMA_MATRIX)
    stretched = luminance.point(_contrast_lut(contrast))
    return stretched.convert("RGB")


def preprocess_image_bytes(
    image_bytes: bytes, scale: float = DEFAULT_UPSCALE, contrast: float = DEFAULT_CONTRAST
) -> bytes:
    """
    Run preprocess_image on encoded image bytes.

    Returns:
        PNG-encoded image bytes
    """
    from PIL import Image

    with Image.open(io.BytesIO(image_bytes)) as img:
        processed = preprocess_image(img, scale=scale, contrast=contrast)

    buffer = io.BytesIO()
    processed.save(buffer, format="PNG")
    return buffer.getvalue()


def _tokens_from_detections(detections: list[Any], min_confidence: float) -> list[Token]:
    """Convert PaddleOCR-style ``[[points], [text, confidence]]`` detections."""
    tokens: list[Token] = []
    for detection in detections:
        bbox, (text, confidence) = detection
        text = (text or "").strip()
        if not text or confidence < min_confidence:
            continue
        x_coords = [point[0] for point in bbox]
        y_coords = [point[1] for point in bbox]
        tokens.append(
            Token(
                text=text,
                x0=float(min(x_coords)),
                x1=float(max(x_coords)),
                y0=float(min(y_coords)),
                y1=float(max(y_coords)),
                confidence=float(confidence),
            )
        )
    return tokens


def _tokens_from_words(words: list[dict[str, Any]], min_confidence: float) -> list[Token]:
    """Convert Tesseract-style words (confidence on a 0-100 scale)."""
    tokens: list[Token] = []
    for word in words:
        text = (word.get("text") or "").strip()
        if not text:
            continue
        confidence = float(word.get("confidence", 100)) / 100
        if confidence < min_confidence:
            continue
        bbox = word.get("bbox") or {}
        tokens.append(
            Token(
                text=text,
                x0=float(bbox.get("x0", 0)),
                x1=float(bbox.get("x1", 0)),
                y0=float(bbox.get("y0", 0)),
                y1=float(bbox.get("y1", 0)),
                confidence=confidence,
            )
        )
    return tokens


def _rebuild_full_text(tokens: list[Token], tolerance: float = DEFAULT_LINE_TOLERANCE) -> str:
    return "\n".join(line.text for line in group_tokens_into_lines(tokens, tolerance))


def transform_ocr_result(
    raw_result: dict[str, Any],
    min_confidence: float = DEFAULT_MIN_TOKEN_CONFIDENCE,
    line_tolerance: float = DEFAULT_LINE_TOLERANCE,
) -> OcrResult:
    """
    Normalize the OCR service response into tokens plus a text blob.

    Accepts either PaddleOCR-style ``detections`` or Tesseract-style ``words``.
    Blank and low-confidence tokens are dropped. When the service sends no
    text blob, one is rebuilt from the tokens, one grouped row per line.

    Raises:
        ValueError: the response does not have either of the expected shapes
    """
    try:
        if raw_result.get("detections"):
            tokens = _tokens_from_detections(raw_result["detections"], min_confidence)
        elif raw_result.get("words"):
            tokens = _tokens_from_words(raw_result["words"], min_confidence)
        else:
            tokens = []
    except (KeyError, TypeError, ValueError, AttributeError, IndexError) as e:
        raise ValueError(f"Malformed OCR tokens: {e}") from e

    full_text = raw_result.get("full_text") or raw_result.get("text") or ""
    if not isinstance(full_text, str):
        raise ValueError(f"Malformed OCR text: expected a string, got {type(full_text).__name__}")
    if not full_text.strip() and tokens:
        full_text = _rebuild_full_text(tokens, line_tolerance)

    return OcrResult(tokens=tokens, full_text=full_text)
