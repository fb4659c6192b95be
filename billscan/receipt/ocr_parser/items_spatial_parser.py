"""Spatial (bbox-based) receipt item extraction."""

from collections.abc import Sequence
from dataclasses import dataclass

from billscan.domain.receipt import CandidateItem, Line, Token

from .common import (
    ExtractionConfig,
    clean_item_name,
    has_minimum_letter_content,
    is_amount_like,
    is_noise_line,
    is_price_column_token,
    normalize_amount,
    parse_amount,
    split_leading_quantity,
)
from .line_grouping import group_tokens_into_lines


@dataclass(frozen=True)
class PriceColumn:
    """Price found at the right end of a line.

    ``boundary`` is the index of the first price token; everything before it
    is name/quantity text.
    """

    price: int
    boundary: int


def _scan_contiguous_suffix(tokens: Sequence[Token], min_digits: int) -> PriceColumn | None:
    """Aggregate the run of numeric-looking tokens at the right end of the line."""
    idx = len(tokens)
    while idx > 0 and is_price_column_token(tokens[idx - 1].text):
        idx -= 1
    if idx == len(tokens):
        return None

    price_text = "".join(token.text for token in tokens[idx:])
    if len(normalize_amount(price_text)) < min_digits:
        return None
    price = parse_amount(price_text)
    if price is None:
        return None
    return PriceColumn(price=price, boundary=idx)


def _scan_rightmost_candidate(tokens: Sequence[Token], min_digits: int) -> PriceColumn | None:
    """Use the rightmost token that carries a full amount by itself."""
    for idx in range(len(tokens) - 1, -1, -1):
        if not is_amount_like(tokens[idx].text, min_digits):
            continue
        price = parse_amount("".join(token.text for token in tokens[idx:]))
        if price is None:
            return None
        return PriceColumn(price=price, boundary=idx)
    return None


def locate_price_column(tokens: Sequence[Token], config: ExtractionConfig | None = None) -> PriceColumn | None:
    """
    Find the price amount at the right end of one line.

    Strategy:
    1. Walk tokens from the right while they look numeric (digits, ``.``,
       ``,``, spaces, ``$``) and read the joined digits as the price.
    2. If that fails, fall back to the rightmost token that has enough digits
       on its own (handles receipts with irregular spacing or a trailing mark).

    Returns None when the line carries no acceptable price.
    """
    if config is None:
        config = ExtractionConfig()
    if not tokens:
        return None

    column = _scan_contiguous_suffix(tokens, config.min_price_digits)
    if column is None and config.use_candidate_scan:
        column = _scan_rightmost_candidate(tokens, config.min_price_digits)
    return column


def decompose_name_quantity(
    name_tokens: Sequence[Token], config: ExtractionConfig | None = None
) -> tuple[str, int] | None:
    """
    Turn the tokens left of the price into ``(name, quantity)``.

    Returns None for header/metadata fragments and names too short to be real.
    """
    if config is None:
        config = ExtractionConfig()

    name = clean_item_name(" ".join(token.text for token in name_tokens))
    # Colons mark "label: value" metadata rows.
    if ":" in name:
        return None
    if len(name) < config.min_name_length:
        return None
    if config.strict_names and not has_minimum_letter_content(name):
        return None

    quantity, name = split_leading_quantity(name)
    if quantity < 1 or not name:
        return None
    return name, quantity


def _parse_line(line: Line, config: ExtractionConfig) -> CandidateItem | None:
    """Parse one grouped line into a candidate item, or None if it is rejected."""
    if is_noise_line(line.text, config):
        return None

    column = locate_price_column(line.tokens, config)
    if column is None:
        return None

    decomposed = decompose_name_quantity(line.tokens[: column.boundary], config)
    if decomposed is None:
        return None

    name, quantity = decomposed
    return CandidateItem(name=name, price=column.price, quantity=quantity)


def _extract_items_with_bbox(
    tokens: Sequence[Token],
    config: ExtractionConfig | None = None,
) -> list[CandidateItem]:
    """
    Extract items using token bounding boxes.

    Tokens are grouped into rows by vertical center, then each row is read as
    ``[quantity] name ... price`` with the price taken from the right edge.
    Rows that fail any check are dropped; nothing partial is emitted.
    """
    if config is None:
        config = ExtractionConfig()

    items: list[CandidateItem] = []
    for line in group_tokens_into_lines(tokens, config.line_tolerance):
        item = _parse_line(line, config)
        if item is not None:
            items.append(item)
    return items
