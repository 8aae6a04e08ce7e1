"""Small recursive exercises: countdown, greeting, factorial, sum, count and max."""

from __future__ import annotations

from functools import reduce
from typing import Any, Iterable, Sequence


def countdown(i: int) -> None:
    """Print the numbers from ``i`` down to 0, one per line."""
    if i < 0:
        raise ValueError("countdown needs a non-negative start")
    for n in range(i, -1, -1):
        print(n)


def _greet2(name: str) -> None:
    print(f"How are you, {name}?")


def greet(name: str) -> None:
    """Print a short greeting conversation for ``name``."""
    print("Hello," + name + "!")
    _greet2(name)
    print("Getting ready to say bye...")


def fact(x: int) -> int:
    """Factorial of a positive integer."""
    if x < 1:
        raise ValueError("factorial is defined here for positive integers only")
    result = 1
    for n in range(2, x + 1):
        result *= n
    return result


def loop_sum(items: Iterable[Any]) -> Any:
    """Sum the items from first to last, starting at 0."""
    total = 0
    for item in items:
        total += item
    return total


def recursive_sum(items: Sequence[Any]) -> Any:
    """Sum as ``last + sum(rest)``, so the additions nest from the right."""
    return reduce(lambda acc, item: item + acc, items, 0)


def recursive_count(items: Iterable[Any]) -> int:
    """Number of items."""
    return sum(1 for _ in items)


def recursive_max(items: Sequence[Any]) -> Any:
    """Largest item; on ties the earliest one wins."""
    if not items:
        raise ValueError("Cannot select max value from empty sequence")
    first, *rest = items
    return reduce(lambda best, item: item if item > best else best, rest, first)