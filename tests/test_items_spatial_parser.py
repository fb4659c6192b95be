"""Tests for bbox-based receipt item extraction."""

from billscan.domain.receipt import CandidateItem, OcrResult, Token
from billscan.receipt.ocr_parser.common import ExtractionConfig
from billscan.receipt.ocr_parser.items_spatial_parser import _extract_items_with_bbox
from billscan.receipt.ocr_result_parser import parse_receipt

PRICE_X = 400.0


def _row(y: float, *texts: str, price: str | None = None) -> list[Token]:
    """Lay out words left to right at height ``y``, with an optional right-aligned price."""
    tokens = []
    x = 10.0
    for text in texts:
        width = 11.0 * len(text)
        tokens.append(Token(text=text, x0=x, x1=x + width, y0=y - 9, y1=y + 9))
        x += width + 7.0
    if price is not None:
        tokens.append(Token(text=price, x0=PRICE_X, x1=PRICE_X + 11.0 * len(price), y0=y - 8, y1=y + 10))
    return tokens


def test_single_item_line() -> None:
    items = _extract_items_with_bbox(_row(100, "Pizza", price="12.000"))

    assert items == [CandidateItem(name="Pizza", price=12000, quantity=1)]


def test_leading_quantity_line() -> None:
    items = _extract_items_with_bbox(_row(100, "2", "Bebidas", price="2.500"))

    assert items == [CandidateItem(name="Bebidas", price=2500, quantity=2)]


def test_subtotal_line_rejected() -> None:
    assert _extract_items_with_bbox(_row(100, "SUBTOTAL", price="14500")) == []


def test_plural_total_line_rejected() -> None:
    assert _extract_items_with_bbox(_row(100, "Totales", price="14.500")) == []


def test_timestamp_line_rejected() -> None:
    assert _extract_items_with_bbox(_row(100, "20:06:30")) == []
    assert _extract_items_with_bbox(_row(100, "14/08/25", price="20:06:30")) == []


def test_repeated_lines_merge_after_parse() -> None:
    tokens = _row(100, "Agua", price="1.500") + _row(140, "Agua", price="1.500")

    assert len(_extract_items_with_bbox(tokens)) == 2

    result = parse_receipt(OcrResult(tokens=tokens))
    assert [item.to_dict() for item in result.items] == [{"id": 1, "name": "Agua", "qty": 2, "price": 1500}]


def test_full_receipt_extracts_only_items() -> None:
    rows = [
        _row(40, "Restaurant", "El", "Buen", "Sabor"),
        _row(70, "Mesa:", "12", "Garzon:", "Pedro"),
        _row(100, "Fecha:", "14/08/25", "20:06:30"),
        _row(140, "2", "Bebidas", price="2.500"),
        _row(170, "Pizza", "Napolitana", price="12.000"),
        _row(200, "Lomo", "-", "Saltado", price="9.800"),
        _row(230, "Agua", price="1.500"),
        _row(260, "Agua", price="1.500"),
        _row(300, "Subtotal", price="29.300"),
        _row(330, "Propina", "sugerida", "10%", price="2.930"),
        _row(360, "TOTAL", price="32.230"),
    ]
    # Token order from the OCR engine is not reading order.
    tokens = [token for row in reversed(rows) for token in reversed(row)]

    result = parse_receipt(OcrResult(tokens=tokens, full_text=""))

    assert result.strategy == "geometric"
    assert [(item.id, item.name, item.qty, item.price) for item in result.items] == [
        (1, "Bebidas", 2, 2500),
        (2, "Pizza Napolitana", 1, 12000),
        (3, "Lomo Saltado", 1, 9800),
        (4, "Agua", 2, 1500),
    ]


def test_emitted_items_keep_price_and_quantity_invariants() -> None:
    tokens = (
        _row(100, "0", "Agua", price="1.500")
        + _row(130, "Pan", price="0.000")
        + _row(160, "Cafe", price="500")
        + _row(190, "3", "Empanadas", price="4.500")
    )

    items = _extract_items_with_bbox(tokens)

    assert items == [CandidateItem(name="Empanadas", price=4500, quantity=3)]
    assert all(item.price > 0 and item.quantity >= 1 for item in items)


def test_strict_mode_drops_short_single_word_names() -> None:
    tokens = _row(100, "Pizza", price="12.000") + _row(130, "Pizza", "Napolitana", price="12.000")

    items = _extract_items_with_bbox(tokens, ExtractionConfig().with_strict())

    assert [item.name for item in items] == ["Pizza Napolitana"]
