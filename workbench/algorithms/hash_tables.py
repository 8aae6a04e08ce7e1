"""Hash table exercises: a grocery price list and a voter check."""

from __future__ import annotations

from typing import Mapping

GROCERIES: dict[str, float] = {
    "apple": 0.67,
    "milk": 1.49,
    "avocado": 1.49,
}

VOTE_MESSAGE = "Let them vote!"
KICK_MESSAGE = "Kick them out!"


def format_prices(book: Mapping[str, float]) -> str:
    """Render a price book as ``name: price$`` lines."""
    return "\n".join(f"{name}: {price:g}$" for name, price in book.items())


class VoterRegistry:
    """Remembers who has voted so nobody votes twice."""

    def __init__(self) -> None:
        self.voted: dict[str, bool] = {}

    def check(self, name: str) -> str:
        """Record ``name`` as voted and say whether they may vote."""
        if self.voted.get(name):
            return KICK_MESSAGE
        self.voted.setdefault(name, True)
        return VOTE_MESSAGE