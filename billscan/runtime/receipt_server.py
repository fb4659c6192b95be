"""FastAPI server that turns uploaded receipt photos into reviewable line items."""

import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from billscan.receipt.ocr_result_parser import parse_receipt
from billscan.runtime.logging import get_logger
from billscan.runtime.parser_config import load_extraction_config
from billscan.runtime.receipt_pipeline import RecognitionFailure, call_ocr_service_async

logger = get_logger(__name__)

OCR_SERVICE_URL = os.environ.get("OCR_SERVICE_URL", "http://localhost:8001")

app = FastAPI(title="Receipt Item Scanner")


@app.post("/scan")
async def scan_receipt(request: Request, strict: bool = False) -> JSONResponse:
    """Receive a receipt image and return the extracted items for review."""
    form = await request.form()

    file = None
    for key, value in form.items():
        logger.debug("Form field: key=%r, type=%s", key, type(value))
        if hasattr(value, "read"):
            file = value
            break

    if not file:
        return JSONResponse({"status": "error", "message": "No file found in request"}, status_code=400)

    contents = await file.read()
    config = load_extraction_config()
    if strict:
        config = config.with_strict()

    try:
        _, ocr_result = await call_ocr_service_async(
            contents,
            OCR_SERVICE_URL,
            filename=getattr(file, "filename", None) or "receipt.png",
            config=config,
        )
    except RecognitionFailure as e:
        logger.warning("Recognition failed: %s", e)
        return JSONResponse(
            {"status": "error", "message": "Could not read the image. Try a sharper photo."},
            status_code=502,
        )

    result = parse_receipt(ocr_result, config=config)
    logger.info("Extracted %d items via %s", len(result.items), result.strategy)
    return JSONResponse(
        {
            "status": "success",
            "strategy": result.strategy,
            "items": [item.to_dict() for item in result.items],
        }
    )


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
