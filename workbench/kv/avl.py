"""Intrusive AVL tree that keeps subtree heights and sizes for rank queries."""

from __future__ import annotations

from typing import Optional


class AVLNode:
    """A tree node meant to be subclassed or embedded by its owner."""

    def __init__(self) -> None:
        self.parent: Optional[AVLNode] = None
        self.left: Optional[AVLNode] = None
        self.right: Optional[AVLNode] = None
        self.height = 1
        self.cnt = 1

    def reset(self) -> None:
        """Return the node to the state of a fresh, detached leaf."""
        self.parent = self.left = self.right = None
        self.height = 1
        self.cnt = 1


def height(node: Optional[AVLNode]) -> int:
    """Height of the subtree rooted at ``node``; 0 for an empty subtree."""
    return node.height if node is not None else 0


def count(node: Optional[AVLNode]) -> int:
    """Number of nodes in the subtree rooted at ``node``; 0 for an empty subtree."""
    return node.cnt if node is not None else 0


def _update(node: AVLNode) -> None:
    node.height = 1 + max(height(node.left), height(node.right))
    node.cnt = 1 + count(node.left) + count(node.right)


def _rot_left(node: AVLNode) -> AVLNode:
    parent = node.parent
    new_node = node.right
    assert new_node is not None
    inner = new_node.left
    node.right = inner
    if inner is not None:
        inner.parent = node
    new_node.parent = parent
    new_node.left = node
    node.parent = new_node
    _update(node)
    _update(new_node)
    return new_node


def _rot_right(node: AVLNode) -> AVLNode:
    parent = node.parent
    new_node = node.left
    assert new_node is not None
    inner = new_node.right
    node.left = inner
    if inner is not None:
        inner.parent = node
    new_node.parent = parent
    new_node.right = node
    node.parent = new_node
    _update(node)
    _update(new_node)
    return new_node


def _fix_left(node: AVLNode) -> AVLNode:
    left = node.left
    assert left is not None
    if height(left.left) < height(left.right):
        node.left = _rot_left(left)
    return _rot_right(node)


def _fix_right(node: AVLNode) -> AVLNode:
    right = node.right
    assert right is not None
    if height(right.right) < height(right.left):
        node.right = _rot_right(right)
    return _rot_left(node)


def _replace_child(parent: AVLNode, old: AVLNode, new: Optional[AVLNode]) -> None:
    if parent.left is old:
        parent.left = new
    else:
        parent.right = new


def fix(node: AVLNode) -> AVLNode:
    """Rebalance from ``node`` up to the root and return the new root."""
    while True:
        parent = node.parent
        on_left = parent is not None and parent.left is node
        _update(node)
        lh = height(node.left)
        rh = height(node.right)
        fixed = node
        if lh == rh + 2:
            fixed = _fix_left(node)
        elif lh + 2 == rh:
            fixed = _fix_right(node)
        if parent is None:
            return fixed
        if on_left:
            parent.left = fixed
        else:
            parent.right = fixed
        node = parent


def _delete_easy(node: AVLNode) -> Optional[AVLNode]:
    assert node.left is None or node.right is None
    child = node.left if node.left is not None else node.right
    parent = node.parent
    if child is not None:
        child.parent = parent
    if parent is None:
        return child
    _replace_child(parent, node, child)
    return fix(parent)


def delete(node: AVLNode) -> Optional[AVLNode]:
    """Detach ``node`` from its tree and return the new root (None if empty)."""
    if node.left is None or node.right is None:
        return _delete_easy(node)
    victim = node.right
    while victim.left is not None:
        victim = victim.left
    root = _delete_easy(victim)
    # the successor takes over the position of the removed node
    victim.left = node.left
    victim.right = node.right
    victim.parent = node.parent
    victim.height = node.height
    victim.cnt = node.cnt
    if victim.left is not None:
        victim.left.parent = victim
    if victim.right is not None:
        victim.right.parent = victim
    parent = node.parent
    if parent is None:
        return victim
    _replace_child(parent, node, victim)
    return root


def offset(node: AVLNode, offset: int) -> Optional[AVLNode]:
    """Walk ``offset`` ranks forward (or backward if negative) from ``node``.

    Returns None when the target rank lies outside the tree.
    """
    pos = 0
    current = node
    while offset != pos:
        if pos < offset and pos + count(current.right) >= offset:
            current = current.right
            assert current is not None
            pos += count(current.left) + 1
        elif pos > offset and pos - count(current.left) <= offset:
            current = current.left
            assert current is not None
            pos -= count(current.right) + 1
        else:
            parent = current.parent
            if parent is None:
                return None
            if parent.right is current:
                pos -= count(current.left) + 1
            else:
                pos += count(current.right) + 1
            current = parent
    return current