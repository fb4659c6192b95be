"""Group positioned OCR tokens into printed text rows."""

from collections.abc import Iterable

from billscan.domain.receipt import Line, Token

from .common import DEFAULT_LINE_TOLERANCE


def _find_line(lines: list[Line], y_center: float, tolerance: float) -> Line | None:
    """Return the first line (in creation order) whose seed center is within tolerance."""
    for line in lines:
        if abs(line.y_center - y_center) < tolerance:
            return line
    return None


def group_tokens_into_lines(tokens: Iterable[Token], tolerance: float = DEFAULT_LINE_TOLERANCE) -> list[Line]:
    """
    Assign each token to exactly one line by vertical proximity.

    A line keeps the vertical center of the token that opened it; later tokens
    do not move it. On tall or skewed rows this lets trailing tokens fall out
    of the window and open a new line, which is accepted as part of the
    heuristic.

    Returns lines sorted top to bottom, each with tokens sorted by ``x0``.
    """
    lines: list[Line] = []
    for token in tokens:
        y_center = token.y_center
        line = _find_line(lines, y_center, tolerance)
        if line is None:
            line = Line(y_center=y_center)
            lines.append(line)
        line.tokens.append(token)

    lines.sort(key=lambda line: line.y_center)
    for line in lines:
        line.tokens.sort(key=lambda token: token.x0)
    return lines
