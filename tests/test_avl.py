import random

import pytest

from workbench.kv.avl import AVLNode, count, delete, fix, height, offset


class Item(AVLNode):
    def __init__(self, val):
        super().__init__()
        self.val = val


def insert(root, node):
    parent = None
    cur = root
    go_left = False
    while cur is not None:
        parent = cur
        go_left = node.val < cur.val
        cur = cur.left if go_left else cur.right
    node.parent = parent
    if parent is not None:
        if go_left:
            parent.left = node
        else:
            parent.right = node
    return fix(node)


def inorder(node):
    if node is None:
        return []
    return inorder(node.left) + [node.val] + inorder(node.right)


def verify(node, parent=None):
    if node is None:
        return
    assert node.parent is parent
    verify(node.left, node)
    verify(node.right, node)
    lh, rh = height(node.left), height(node.right)
    assert abs(lh - rh) <= 1
    assert node.height == 1 + max(lh, rh)
    assert node.cnt == 1 + count(node.left) + count(node.right)
    if node.left is not None:
        assert node.left.val <= node.val
    if node.right is not None:
        assert node.right.val >= node.val


def build(values):
    root = None
    nodes = []
    for v in values:
        n = Item(v)
        nodes.append(n)
        root = insert(root, n)
    return root, nodes


def test_empty_helpers():
    assert height(None) == 0
    assert count(None) == 0


def test_single_node():
    root, _ = build([5])
    assert root.height == 1
    assert count(root) == 1
    assert delete(root) is None


@pytest.mark.parametrize("order", ["ascending", "descending", "shuffled"])
def test_insert_keeps_balance(order):
    values = list(range(200))
    if order == "descending":
        values.reverse()
    elif order == "shuffled":
        random.Random(7).shuffle(values)
    root, _ = build(values)
    verify(root)
    assert root.parent is None
    assert inorder(root) == sorted(values)
    assert count(root) == len(values)


def test_offset_walks_ranks():
    root, nodes = build(range(50))
    by_val = {n.val: n for n in nodes}
    start = by_val[0]
    for target in range(50):
        assert offset(start, target).val == target
    assert offset(start, 50) is None
    assert offset(start, -1) is None
    end = by_val[49]
    for back in range(50):
        assert offset(end, -back).val == 49 - back
    middle = by_val[20]
    assert offset(middle, 0) is middle
    assert offset(middle, 5).val == 25
    assert offset(middle, -7).val == 13


def test_delete_random_order():
    rng = random.Random(3)
    values = list(range(120))
    rng.shuffle(values)
    root, nodes = build(values)
    remaining = sorted(values)
    rng.shuffle(nodes)
    for node in nodes:
        root = delete(node)
        remaining.remove(node.val)
        verify(root)
        assert inorder(root) == remaining
        assert count(root) == len(remaining)
    assert root is None


def test_delete_node_with_two_children_keeps_order():
    root, nodes = build(range(15))
    target = root
    assert target.left is not None and target.right is not None
    new_root = delete(target)
    verify(new_root)
    assert target.val not in inorder(new_root)
    assert count(new_root) == 14