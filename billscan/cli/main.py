#!/usr/bin/env python3

import argparse
from collections.abc import Callable, Sequence

from billscan.receipt.ocr_parser.common import DEFAULT_CONTRAST, DEFAULT_UPSCALE


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Run a command handler that may call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def _add_extraction_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="Extraction settings TOML (default: config/billscan.toml)")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject short single-word names and labeled date/time rows",
    )
    parser.add_argument("--json", action="store_true", help="Print items as JSON instead of a table")


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Receipt line-item extraction CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  scan <image>               Preprocess, OCR and extract items from a receipt photo
  parse <ocr_json>           Extract items from a saved OCR service response
  preprocess <image> <out>   Write the grayscale/contrast/upscaled OCR input image
  serve [--port]             Start receipt upload server

Exit codes:
  0 = items found, 1 = failure, 2 = recognition worked but no items were found
""",
    )

    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level: debug, info, warning or error (default: BILLSCAN_LOG_LEVEL, else info)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Scan a receipt image")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument(
        "--ocr-url", default="http://localhost:8001", help="OCR service URL (default: http://localhost:8001)"
    )
    _add_extraction_options(scan_parser)

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Extract items from saved OCR JSON")
    parse_parser.add_argument("ocr_json", help="Path to OCR service response JSON")
    _add_extraction_options(parse_parser)

    # preprocess command
    preprocess_parser = subparsers.add_parser("preprocess", help="Write the preprocessed OCR input image")
    preprocess_parser.add_argument("image", help="Path to receipt image")
    preprocess_parser.add_argument("output", help="Output PNG path")
    preprocess_parser.add_argument(
        "--scale", type=float, default=DEFAULT_UPSCALE, help=f"Upscale factor (default: {DEFAULT_UPSCALE})"
    )
    preprocess_parser.add_argument(
        "--contrast", type=float, default=DEFAULT_CONTRAST, help=f"Contrast factor (default: {DEFAULT_CONTRAST})"
    )

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start receipt upload server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    args = parser.parse_args(argv)

    if args.log_level is not None:
        from billscan.runtime.logging import parse_log_level, set_log_level

        try:
            level = parse_log_level(args.log_level)
        except ValueError as e:
            parser.error(str(e))
        set_log_level(level)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "scan":
        from billscan.cli.receipt import cmd_scan

        return _run_command(cmd_scan, args)
    elif args.command == "parse":
        from billscan.cli.receipt import cmd_parse

        return _run_command(cmd_parse, args)
    elif args.command == "preprocess":
        from billscan.cli.receipt import cmd_preprocess

        return _run_command(cmd_preprocess, args)
    elif args.command == "serve":
        from billscan.cli.receipt import cmd_serve

        return _run_command(cmd_serve, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
