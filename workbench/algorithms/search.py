"""Binary search over sorted sequences."""

from __future__ import annotations

from typing import Any, Optional, Sequence


def binary_search(items: Sequence[Any], item: Any) -> Optional[int]:
    """Return the index of ``item`` in the sorted ``items``, or None if absent."""
    low = 0
    high = len(items) - 1
    while low <= high:
        mid = (low + high) // 2
        guess = items[mid]
        if guess == item:
            return mid
        if guess > item:
            high = mid - 1
        else:
            low = mid + 1
    return None