"""Receipt workflows."""

from billscan.application.receipts.scan import ReceiptScanRequest, ReceiptScanResult, run_receipt_scan

__all__ = ["ReceiptScanRequest", "ReceiptScanResult", "run_receipt_scan"]
