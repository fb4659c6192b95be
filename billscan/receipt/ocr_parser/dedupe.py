"""Merge repeated receipt lines and assign run-scoped ids."""

from collections.abc import Iterable

from billscan.domain.receipt import CandidateItem, LineItem


def _merge_key(item: CandidateItem) -> tuple[str, int]:
    return item.name.casefold(), item.price


def merge_duplicate_items(candidates: Iterable[CandidateItem]) -> list[CandidateItem]:
    """
    Merge candidates with the same name (case-insensitive) and price.

    Quantities are summed and first-seen order is kept. Names that differ by
    even one character stay separate so OCR near-misses reach human review.
    The input items are not modified.
    """
    merged: dict[tuple[str, int], CandidateItem] = {}
    for item in candidates:
        key = _merge_key(item)
        existing = merged.get(key)
        if existing is None:
            merged[key] = CandidateItem(name=item.name, price=item.price, quantity=item.quantity)
        else:
            existing.quantity += item.quantity
    return list(merged.values())


def finalize_items(candidates: Iterable[CandidateItem]) -> list[LineItem]:
    """Merge duplicates and number the survivors from 1."""
    return [
        LineItem(id=index, name=item.name, qty=item.quantity, price=item.price)
        for index, item in enumerate(merge_duplicate_items(candidates), start=1)
    ]
