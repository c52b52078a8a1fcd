"""Helpers for dense, user-defined orderings."""

from typing import Iterable, Sequence, TypeVar

T = TypeVar("T")


def array_move(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """
    Return a copy of ``items`` with the element at ``from_index`` moved to ``to_index``.

    The destination is clamped into ``[0, len(items) - 1]``.

    Raises:
        IndexError: if ``from_index`` is outside the sequence
    """
    if not 0 <= from_index < len(items):
        raise IndexError(f"from_index {from_index} out of range for {len(items)} items")
    moved = list(items)
    item = moved.pop(from_index)
    to_index = max(0, min(to_index, len(moved)))
    moved.insert(to_index, item)
    return moved


def is_dense(orders: Iterable[int]) -> bool:
    """True when the values are exactly ``0..n-1`` with no gaps or duplicates."""
    values = sorted(orders)
    return values == list(range(len(values)))
