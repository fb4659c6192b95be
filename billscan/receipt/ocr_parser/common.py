"""Shared constants, settings and predicates for receipt line-item parsing."""

import re
from dataclasses import dataclass, replace
from functools import lru_cache

# Receipt boilerplate vocabulary. Alphabetic terms match as whole words, terms
# with punctuation match anywhere in the line.
DEFAULT_STOP_TERMS: tuple[str, ...] = (
    # Totals and tip
    "PRE-CUENTA",
    "SUBTOTAL",
    "SUB-TOTAL",
    "TOTAL",
    "PROPINA",
    "SUGERIDA",
    "TIP",
    "GRATUITY",
    "SUGGESTED",
    # Certification / document type
    "COMPROBANTE",
    "VALIDO",
    "VÁLIDO",
    "BOLETA",
    # Staff, table, date and id labels
    "GARZON",
    "GARZÓN",
    "SERVER",
    "MESA",
    "TABLE",
    "PERSONAS",
    "GUESTS",
    "FECHA",
    "DATE",
    "ID",
    # Software provenance footers
    "SOFTWARE",
    "AQUI",
    "USAMOS",
    "FUDO",
    # Section markers
    "#",
)

DEFAULT_LINE_TOLERANCE = 12.0  # device pixels between vertical centers
DEFAULT_MIN_PRICE_DIGITS = 4  # smallest integer amount in the target currencies
DEFAULT_MIN_NAME_LENGTH = 3
DEFAULT_MIN_TOKEN_CONFIDENCE = 0.5
DEFAULT_UPSCALE = 1.25
DEFAULT_CONTRAST = 1.15

# Strict-mode name guard: two lettered words, or this many letters in total.
MIN_LETTERS_SINGLE_WORD = 6

PRICE_COLUMN_TOKEN = re.compile(r"^[0-9.,\s$]+$")
LEADING_QUANTITY = re.compile(r"^\s*(\d{1,3})\s+(.+)$")
DASH_RUN = re.compile(r"[-–—]+")
WHITESPACE_RUN = re.compile(r"\s+")
LABELED_DATETIME = re.compile(r"[/:].*\d")
NON_DIGITS = re.compile(r"[^0-9]")
# A letter, in any script: word character that is neither a digit nor "_".
LETTER = re.compile(r"[^\W\d_]")


@dataclass(frozen=True)
class ExtractionConfig:
    """Tunable knobs for the extractors and the image preprocessor."""

    line_tolerance: float = DEFAULT_LINE_TOLERANCE
    min_price_digits: int = DEFAULT_MIN_PRICE_DIGITS
    min_name_length: int = DEFAULT_MIN_NAME_LENGTH
    use_candidate_scan: bool = True
    strict_names: bool = False
    strict_datetime_filter: bool = False
    min_token_confidence: float = DEFAULT_MIN_TOKEN_CONFIDENCE
    upscale: float = DEFAULT_UPSCALE
    contrast: float = DEFAULT_CONTRAST
    stop_terms: tuple[str, ...] = DEFAULT_STOP_TERMS

    def with_strict(self) -> "ExtractionConfig":
        """Return a copy with the precision-oriented rules switched on."""
        return replace(self, strict_names=True, strict_datetime_filter=True)


def normalize_amount(text: str) -> str:
    """Strip every non-digit; separators are discarded, never reinterpreted."""
    return NON_DIGITS.sub("", text)


def is_amount_like(text: str, min_digits: int = DEFAULT_MIN_PRICE_DIGITS) -> bool:
    """Return True if text carries enough digits to be a price on its own."""
    return len(normalize_amount(text)) >= min_digits


def is_price_column_token(text: str) -> bool:
    """Return True if the token is made only of digits, separators or ``$``."""
    return PRICE_COLUMN_TOKEN.match(text) is not None


def parse_amount(text: str) -> int | None:
    """Parse a price string into a positive integer, or None."""
    digits = normalize_amount(text)
    if not digits:
        return None
    value = int(digits)
    return value if value > 0 else None


@lru_cache(maxsize=16)
def _stop_term_regex(stop_terms: tuple[str, ...]) -> re.Pattern[str] | None:
    parts = []
    for term in stop_terms:
        term = term.strip()
        if not term:
            continue
        escaped = re.escape(term)
        if LETTER.search(term) and re.fullmatch(r"\w+", term):
            # Plurals count ("TOTALES", "PROPINAS"); "ACIDO" and "Tipo" do not.
            parts.append(rf"(?<![^\W\d_]){escaped}(?:E?S)?(?![^\W\d_])")
        else:
            parts.append(escaped)
    if not parts:
        return None
    return re.compile("|".join(parts), re.IGNORECASE)


def is_header_noise(text: str, stop_terms: tuple[str, ...] = DEFAULT_STOP_TERMS) -> bool:
    """Return True if the line contains receipt boilerplate vocabulary."""
    if not text:
        return False
    regex = _stop_term_regex(tuple(stop_terms))
    return regex is not None and regex.search(text) is not None


def has_letter(text: str) -> bool:
    """Return True if text has at least one letter (accented letters count)."""
    return LETTER.search(text) is not None


def looks_like_labeled_datetime(text: str) -> bool:
    """Return True for lines like ``Fecha: 14/08/25 20:06:30``."""
    return LABELED_DATETIME.search(text) is not None


def is_noise_line(text: str, config: ExtractionConfig) -> bool:
    """
    Decide whether a raw receipt line is boilerplate rather than an item.

    Runs before any price or name decomposition, so rejected lines never reach
    the decomposer.
    """
    text = text.strip()
    if not text:
        return True
    if is_header_noise(text, config.stop_terms):
        return True
    # Pure numeric lines: dates, times, codes.
    if not has_letter(text):
        return True
    if config.strict_datetime_filter and looks_like_labeled_datetime(text):
        return True
    return False


def clean_item_name(text: str) -> str:
    """Replace dash runs with a space and collapse whitespace."""
    text = DASH_RUN.sub(" ", text)
    return WHITESPACE_RUN.sub(" ", text).strip()


def has_minimum_letter_content(name: str) -> bool:
    """Return True if the name has two lettered words or enough letters overall."""
    lettered_words = [word for word in name.split() if has_letter(word)]
    if len(lettered_words) >= 2:
        return True
    return len(LETTER.findall(name)) >= MIN_LETTERS_SINGLE_WORD


def split_leading_quantity(name: str) -> tuple[int, str]:
    """Split ``"2 Bebidas"`` into ``(2, "Bebidas")``; quantity defaults to 1."""
    match = LEADING_QUANTITY.match(name)
    if not match:
        return 1, name.strip()
    return int(match.group(1)), match.group(2).strip()
