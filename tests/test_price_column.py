"""Tests for price-column location and name/quantity decomposition."""

from billscan.domain.receipt import Token
from billscan.receipt.ocr_parser.common import ExtractionConfig
from billscan.receipt.ocr_parser.items_spatial_parser import (
    PriceColumn,
    decompose_name_quantity,
    locate_price_column,
)


def _tokens(*texts: str) -> list[Token]:
    tokens = []
    x = 10.0
    for text in texts:
        tokens.append(Token(text=text, x0=x, x1=x + 10 * len(text), y0=100, y1=120))
        x += 10 * len(text) + 8
    return tokens


def test_contiguous_suffix_single_token() -> None:
    assert locate_price_column(_tokens("Pizza", "12.000")) == PriceColumn(price=12000, boundary=1)


def test_contiguous_suffix_joins_split_amount_tokens() -> None:
    assert locate_price_column(_tokens("Pizza", "$", "12", ".000")) == PriceColumn(price=12000, boundary=1)


def test_thousand_separators_are_discarded() -> None:
    assert locate_price_column(_tokens("Cafe", "6 500")).price == 6500
    assert locate_price_column(_tokens("Cafe", "6,500")).price == 6500


def test_short_amount_is_rejected() -> None:
    assert locate_price_column(_tokens("Pan", "500")) is None


def test_zero_amount_is_rejected() -> None:
    assert locate_price_column(_tokens("Pan", "0.000")) is None


def test_candidate_scan_skips_trailing_mark() -> None:
    column = locate_price_column(_tokens("Cafe", "Cortado", "2.500", "C"))

    assert column == PriceColumn(price=2500, boundary=2)


def test_candidate_scan_can_be_disabled() -> None:
    config = ExtractionConfig(use_candidate_scan=False)

    assert locate_price_column(_tokens("Cafe", "Cortado", "2.500", "C"), config) is None


def test_min_price_digits_is_configurable() -> None:
    config = ExtractionConfig(min_price_digits=3)

    assert locate_price_column(_tokens("Pan", "500"), config) == PriceColumn(price=500, boundary=1)


def test_no_tokens_no_price() -> None:
    assert locate_price_column([]) is None


def test_decompose_leading_quantity() -> None:
    assert decompose_name_quantity(_tokens("2", "Bebidas")) == ("Bebidas", 2)


def test_decompose_defaults_quantity_to_one() -> None:
    assert decompose_name_quantity(_tokens("Pizza")) == ("Pizza", 1)


def test_decompose_replaces_dash_runs() -> None:
    assert decompose_name_quantity(_tokens("Lomo", "--", "Saltado")) == ("Lomo Saltado", 1)
    assert decompose_name_quantity(_tokens("Coca–Cola")) == ("Coca Cola", 1)
    assert decompose_name_quantity(_tokens("Té—Verde")) == ("Té Verde", 1)


def test_decompose_rejects_colon_and_short_names() -> None:
    assert decompose_name_quantity(_tokens("Mesa:", "12")) is None
    assert decompose_name_quantity(_tokens("Té")) is None
    assert decompose_name_quantity([]) is None


def test_decompose_rejects_zero_quantity() -> None:
    assert decompose_name_quantity(_tokens("0", "Agua")) is None


def test_strict_mode_requires_letter_content() -> None:
    strict = ExtractionConfig().with_strict()

    assert decompose_name_quantity(_tokens("Pizza"), strict) is None
    assert decompose_name_quantity(_tokens("Empanadas"), strict) == ("Empanadas", 1)
    assert decompose_name_quantity(_tokens("2", "Pan", "Amasado"), strict) == ("Pan Amasado", 2)
