"""Selection sort and quicksort."""

from __future__ import annotations

from typing import Any, MutableSequence, Sequence


def selection_sort(items: MutableSequence[Any]) -> None:
    """Sort ``items`` in place by repeatedly selecting the smallest remaining item."""
    size = len(items)
    for i in range(size - 1):
        min_index = min(range(i, size), key=items.__getitem__)
        if min_index != i:
            items[i], items[min_index] = items[min_index], items[i]


def quicksort(items: Sequence[Any]) -> list[Any]:
    """Return a new sorted list; the pivot is the element just left of the middle."""
    if len(items) < 2:
        return list(items)
    pivot_index = len(items) // 2 - 1
    pivot = items[pivot_index]
    less: list[Any] = []
    greater: list[Any] = []
    for index, item in enumerate(items):
        if index == pivot_index:
            continue
        (less if item <= pivot else greater).append(item)
    return [*quicksort(less), pivot, *quicksort(greater)]