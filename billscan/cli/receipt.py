"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from billscan.domain.receipt import LineItem
from billscan.receipt.ocr_parser.common import ExtractionConfig
from billscan.runtime import get_logger, load_extraction_config
from billscan.runtime.receipt_pipeline import RecognitionFailure, prepare_image

logger = get_logger(__name__)

EXIT_NO_ITEMS = 2


def _load_config(args: argparse.Namespace) -> ExtractionConfig:
    try:
        config = load_extraction_config(args.config)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)
    return config.with_strict() if args.strict else config


def _print_items(items: list[LineItem], strategy: str, as_json: bool) -> None:
    if as_json:
        print(json.dumps({"strategy": strategy, "items": [item.to_dict() for item in items]}, ensure_ascii=False))
        return

    print("\n" + "=" * 60)
    print(f"PARSED ITEMS ({len(items)}, via {strategy})")
    print("=" * 60)
    for item in items:
        qty_str = f" x{item.qty}" if item.qty > 1 else ""
        print(f"  {item.id}. {item.name}{qty_str} - {item.price}")
    print("=" * 60)
    print("Review and edit these items before accepting them.")


def _print_progress(percent: int) -> None:
    print(f"\rReading text... {percent}%", end="", file=sys.stderr, flush=True)
    if percent >= 100:
        print(file=sys.stderr)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server for receiving receipt uploads."""
    import uvicorn

    from billscan.runtime import receipt_server as server
    from billscan.runtime.logging import uvicorn_log_level

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Upload endpoint: http://{args.host}:{args.port}/scan")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port, log_level=uvicorn_log_level())


def cmd_scan(args: argparse.Namespace) -> None:
    """Scan a receipt image and print the extracted items."""
    from billscan.application.receipts.scan import ReceiptScanRequest, run_receipt_scan

    config = _load_config(args)
    result = run_receipt_scan(
        ReceiptScanRequest(
            image_path=Path(args.image),
            ocr_url=args.ocr_url,
            config=config,
            on_progress=None if args.json else _print_progress,
        )
    )

    if result.status == "file_not_found":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        sys.exit(1)

    if result.status == "recognition_failed":
        logger.error("%s", result.error)
        print(f"Could not read the image: {result.error}")
        print("Try again with a sharper photo framed on the item and price columns.")
        sys.exit(1)

    if result.status == "no_items":
        print("Text was recognized but no items were found.")
        sys.exit(EXIT_NO_ITEMS)

    _print_items(result.items, result.strategy, args.json)


def cmd_parse(args: argparse.Namespace) -> None:
    """Extract items from a saved OCR service response."""
    from billscan.receipt.ocr_result_parser import parse_receipt
    from billscan.runtime.receipt_pipeline import load_ocr_json

    json_path = Path(args.ocr_json)
    if not json_path.exists():
        print(f"Error: OCR JSON not found: {json_path}")
        sys.exit(1)

    config = _load_config(args)
    try:
        ocr_result = load_ocr_json(json_path, config)
    except ValueError as e:
        print(f"Error: could not read OCR JSON: {e}")
        sys.exit(1)

    result = parse_receipt(ocr_result, config=config)
    if result.is_empty:
        print("No items were found.")
        sys.exit(EXIT_NO_ITEMS)

    _print_items(result.items, result.strategy, args.json)


def cmd_preprocess(args: argparse.Namespace) -> None:
    """Write the preprocessed OCR input image for inspection."""
    from dataclasses import replace

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"Error: Receipt file not found: {image_path}")
        sys.exit(1)

    config = replace(ExtractionConfig(), upscale=args.scale, contrast=args.contrast)
    try:
        processed = prepare_image(image_path.read_bytes(), config)
    except RecognitionFailure as e:
        print(f"Error: {e}")
        sys.exit(1)

    output_path = Path(args.output)
    output_path.write_bytes(processed)
    print(f"Preprocessed image saved to: {output_path}")
