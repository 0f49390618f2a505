# surfwindow/core/ordered.py
"""
Search helpers for time-ordered sequences.

Tide curve segments and sun events are both kept sorted by time, and both
need the same question answered: which element is the last one at (or
strictly before) a given instant?
"""
from __future__ import annotations

from bisect import bisect_left, bisect_right
from datetime import datetime
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


def bracket_index(
    items: Sequence[T],
    t: datetime,
    key: Callable[[T], datetime],
    *,
    inclusive: bool = True,
) -> int:
    """
    Return the index of the last element whose key is at or before `t`.

    inclusive:
      - True : key(item) <= t
      - False: key(item) <  t

    Returns -1 when no element qualifies. `items` must be sorted by `key`.
    """
    if inclusive:
        return bisect_right(items, t, key=key) - 1
    return bisect_left(items, t, key=key) - 1


def is_strictly_increasing(items: Sequence[T], key: Callable[[T], datetime]) -> bool:
    return all(key(a) < key(b) for a, b in zip(items, items[1:]))
