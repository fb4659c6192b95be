"""Receipt line-item extraction from OCR output."""

__version__ = "0.3.0"
