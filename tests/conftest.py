"""Shared pytest fixtures for billscan tests."""

from __future__ import annotations

import io

import pytest


@pytest.fixture
def receipt_png() -> bytes:
    """A tiny light-gray PNG standing in for a receipt photo."""
    from PIL import Image

    img = Image.new("RGB", (40, 30), (200, 200, 200))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
