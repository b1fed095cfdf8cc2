"""List reordering shared by the field editor and the column order."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def move_item(items: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """
    Return a copy with the item at *old_index* moved to *new_index*,
    shifting the items in between by one.
    """
    result = list(items)
    item = result.pop(old_index)
    result.insert(new_index, item)
    return result


def move_to_position_of(
    items: Sequence[T],
    from_key: str,
    to_key: str,
    key: Optional[Callable[[T], str]] = None,
) -> Optional[List[T]]:
    """
    Move the item identified by *from_key* to the position currently held
    by *to_key*. Returns None (no-op) when the keys are equal or either one
    is not present.
    """
    if from_key == to_key:
        return None
    keys = [key(item) if key else item for item in items]
    try:
        old_index = keys.index(from_key)
        new_index = keys.index(to_key)
    except ValueError:
        return None
    return move_item(items, old_index, new_index)
