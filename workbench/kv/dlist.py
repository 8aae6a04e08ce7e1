"""Intrusive circular doubly linked list."""

from __future__ import annotations

from typing import Iterator


class DList:
    """A list link; a lone link is its own predecessor and successor."""

    def __init__(self) -> None:
        self.prev: DList = self
        self.next: DList = self

    def empty(self) -> bool:
        """True if no other link is attached to this one."""
        return self.next is self

    def detach(self) -> None:
        """Unlink this link from its neighbours."""
        prev, nxt = self.prev, self.next
        prev.next = nxt
        nxt.prev = prev

    def insert_before(self, rookie: DList) -> None:
        """Link ``rookie`` in just before this link."""
        prev = self.prev
        prev.next = rookie
        rookie.prev = prev
        rookie.next = self
        self.prev = rookie

    def __iter__(self) -> Iterator[DList]:
        """Iterate over the other links, starting after this one."""
        node = self.next
        while node is not self:
            nxt = node.next
            yield node
            node = nxt