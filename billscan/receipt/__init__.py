"""Receipt OCR post-processing (pure: no network, no filesystem)."""
