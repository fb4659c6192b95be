"""Text-line based receipt item extraction (no token geometry)."""

import re
from functools import lru_cache

from billscan.domain.receipt import CandidateItem

from .common import ExtractionConfig, clean_item_name, is_noise_line, parse_amount


@lru_cache(maxsize=8)
def _item_line_pattern(min_price_digits: int) -> re.Pattern[str]:
    """
    ``[qty] name [qty] amount`` with the amount anchored at line end.

    The amount is either grouped triplets ("12.000", "1 500", "2,500") or a
    bare run of at least ``min_price_digits`` digits.
    """
    return re.compile(
        r"^(?:(?P<lead_qty>\d{1,3})\s+)?"
        r"(?P<name>.+?)"
        r"(?:\s+(?P<mid_qty>\d{1,3}))?"
        rf"\s+(?P<amount>\$?\s?(?:\d{{1,3}}(?:[.,\s]\d{{3}})+|\d{{{min_price_digits},}}))$"
    )


def _split_lines(full_text: str) -> list[str]:
    return [line.strip() for line in full_text.splitlines() if line.strip()]


def _parse_text_line(line: str, config: ExtractionConfig) -> CandidateItem | None:
    match = _item_line_pattern(config.min_price_digits).match(line)
    if not match:
        return None

    price = parse_amount(match.group("amount"))
    if price is None:
        return None

    # A leading quantity wins over a quantity column printed before the price.
    raw_quantity = match.group("lead_qty") or match.group("mid_qty")
    quantity = int(raw_quantity) if raw_quantity else 1
    if quantity < 1:
        return None

    name = clean_item_name(match.group("name"))
    if match.group("lead_qty") and match.group("mid_qty"):
        # Keep the second number as part of the name ("2 Agua 500 1.500").
        name = clean_item_name(f"{name} {match.group('mid_qty')}")
    if not name:
        return None
    return CandidateItem(name=name, price=price, quantity=quantity)


def _extract_items(full_text: str, config: ExtractionConfig | None = None) -> list[CandidateItem]:
    """
    Extract line items from the recognized text blob.

    Used when the OCR result carries no token geometry, or when the spatial
    pass found nothing. Each line is read as ``[qty] name [qty] amount``;
    lines that do not fit are dropped.

    Args:
        full_text: Recognized text, one printed row per line
        config: Extraction settings; defaults apply when omitted
    """
    if config is None:
        config = ExtractionConfig()

    items: list[CandidateItem] = []
    for line in _split_lines(full_text):
        if is_noise_line(line, config):
            continue
        item = _parse_text_line(line, config)
        if item is not None:
            items.append(item)
    return items
