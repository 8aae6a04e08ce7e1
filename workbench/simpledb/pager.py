"""Page cache over a database file, plus the B-tree split and insert logic."""

from __future__ import annotations

import dataclasses
import os
from typing import Optional, Protocol, Union

from workbench.simpledb.layout import (
    INVALID_PAGE_NUM,
    PAGE_SIZE,
    TABLE_MAX_PAGES,
    NodeHeader,
    NodeType,
)
from workbench.simpledb.node import (
    INTERNAL_NODE_MAX_KEYS,
    LEAF_NODE_CELL_OFFSET,
    LEAF_NODE_CELL_SIZE,
    LEAF_NODE_MAX_CELLS,
    InternalNode,
    LeafNode,
    Node,
    node_from_page,
)
from workbench.simpledb.row import Row

ROOT_PAGE_NUM = 0
LEAF_NODE_LEFT_SPLIT_COUNT = (LEAF_NODE_MAX_CELLS + 1) // 2
LEAF_NODE_RIGHT_SPLIT_COUNT = (LEAF_NODE_MAX_CELLS + 1) - LEAF_NODE_LEFT_SPLIT_COUNT


class CursorPosition(Protocol):
    """Where a new cell belongs: a leaf page and a cell index within it."""

    page_num: int
    cell_num: int


def _encode_cell(key: int, row: Row) -> bytes:
    scratch = LeafNode()
    scratch.header.num_cells = 1
    scratch.set_key(0, key)
    scratch.set_value(0, row)
    return bytes(scratch.page[LEAF_NODE_CELL_OFFSET:LEAF_NODE_CELL_OFFSET + LEAF_NODE_CELL_SIZE])


class Pager:
    """Caches the pages of a database file and maintains the B-tree in them.

    The root of the tree always lives in page 0.
    """

    def __init__(self, filename: Union[str, os.PathLike[str]]) -> None:
        self.filename = os.fspath(filename)
        try:
            self._file = open(self.filename, "r+b")
        except FileNotFoundError:
            self._file = open(self.filename, "w+b")
        self._file.seek(0, os.SEEK_END)
        self.file_length = self._file.tell()
        if self.file_length % PAGE_SIZE != 0:
            self._file.close()
            raise ValueError("Db file is not a whole number of pages. Corrupt file.")
        self.num_pages = self.file_length // PAGE_SIZE
        self._pages: list[Optional[Node]] = [None] * TABLE_MAX_PAGES

    def _load(self, page_num: int) -> Node:
        page = bytearray(PAGE_SIZE)
        self._file.seek(page_num * PAGE_SIZE)
        self._file.readinto(page)
        try:
            return node_from_page(page)
        except ValueError:
            # a page of unknown kind is taken as a fresh, empty root leaf
            return LeafNode(header=NodeHeader(type=NodeType.LEAF, is_root=True))

    def get_page(self, page_num: int) -> Node:
        """The node in ``page_num``, loading or allocating it on first use.

        New pages start as empty, non-root leaves and may only be allocated
        in order, one past the last existing page.
        """
        if not 0 <= page_num < TABLE_MAX_PAGES:
            raise IndexError(f"Tried to fetch page number out of bounds: {page_num}")
        node = self._pages[page_num]
        if node is None:
            if page_num < self.num_pages:
                node = self._load(page_num)
            elif page_num == self.num_pages:
                node = LeafNode()
                self.num_pages += 1
            else:
                raise ValueError("Cannot allocate a page out of sequence")
            self._pages[page_num] = node
        return node

    def _initialize(self, page_num: int, node_type: NodeType) -> Node:
        """Replace the node in ``page_num`` with an empty node of ``node_type``."""
        self.get_page(page_num)
        node: Node = LeafNode() if node_type is NodeType.LEAF else InternalNode()
        self._pages[page_num] = node
        return node

    def _internal(self, page_num: int) -> InternalNode:
        node = self.get_page(page_num)
        if not isinstance(node, InternalNode):
            raise TypeError(f"page {page_num} does not hold an internal node")
        return node

    def _leaf(self, page_num: int) -> LeafNode:
        node = self.get_page(page_num)
        if not isinstance(node, LeafNode):
            raise TypeError(f"page {page_num} does not hold a leaf node")
        return node

    def flush_page(self, page_num: int) -> None:
        """Write the cached page ``page_num`` back to the file."""
        node = self._pages[page_num] if 0 <= page_num < TABLE_MAX_PAGES else None
        if node is None:
            raise ValueError("Tried to flush invalid page")
        node.header.write(node.page)
        self._file.seek(page_num * PAGE_SIZE)
        self._file.write(node.page)

    def unused_page_num(self) -> int:
        """Number of the next page to allocate."""
        return self.num_pages

    def node_max_key(self, node: Node) -> int:
        """Largest key stored in the subtree rooted at ``node``."""
        while isinstance(node, InternalNode):
            node = self.get_page(node.header.right_child_page_num)
        assert isinstance(node, LeafNode)
        return node.key(node.header.num_cells - 1)

    def create_new_root(self, right_child_page_num: int) -> None:
        """Split the root: move its contents to a new left child under a new root."""
        root = self.get_page(ROOT_PAGE_NUM)
        self.get_page(right_child_page_num)
        if isinstance(root, InternalNode):
            self._initialize(right_child_page_num, NodeType.INTERNAL)
        left_page_num = self.unused_page_num()
        self.get_page(left_page_num)
        left_child = type(root)(
            bytearray(root.page), dataclasses.replace(root.header, is_root=False)
        )
        self._pages[left_page_num] = left_child

        if isinstance(left_child, InternalNode):
            for i in range(left_child.header.num_keys):
                self.get_page(left_child.child_page_num(i)).header.parent_page_num = left_page_num
            right_most = self.get_page(left_child.header.right_child_page_num)
            right_most.header.parent_page_num = left_page_num

        new_root = InternalNode()
        new_root.header.is_root = True
        new_root.header.num_keys = 1
        new_root.set_child_page_num(0, left_page_num)
        new_root.set_key(0, self.node_max_key(left_child))
        new_root.header.right_child_page_num = right_child_page_num
        self._pages[ROOT_PAGE_NUM] = new_root

        left_child.header.parent_page_num = ROOT_PAGE_NUM
        self.get_page(right_child_page_num).header.parent_page_num = ROOT_PAGE_NUM

    def internal_node_insert(self, parent_page_num: int, child_page_num: int) -> None:
        """Add the child in ``child_page_num`` to the internal node ``parent_page_num``."""
        parent = self._internal(parent_page_num)
        child = self.get_page(child_page_num)
        child_max_key = self.node_max_key(child)
        index = parent.find_child_index(child_max_key)
        original_num_keys = parent.header.num_keys

        if original_num_keys >= INTERNAL_NODE_MAX_KEYS:
            self.internal_node_split_and_insert(parent_page_num, child_page_num)
            return

        right_child_page_num = parent.header.right_child_page_num
        if right_child_page_num == INVALID_PAGE_NUM:
            parent.header.right_child_page_num = child_page_num
            return

        right_max = self.node_max_key(self.get_page(right_child_page_num))
        parent.header.num_keys = original_num_keys + 1

        if child_max_key > right_max:
            parent.set_child_page_num(original_num_keys, right_child_page_num)
            parent.set_key(original_num_keys, right_max)
            parent.header.right_child_page_num = child_page_num
        else:
            for i in range(original_num_keys, index, -1):
                parent.set_child_page_num(i, parent.child_page_num(i - 1))
                parent.set_key(i, parent.key(i - 1))
            parent.set_child_page_num(index, child_page_num)
            parent.set_key(index, child_max_key)

    def internal_node_split_and_insert(self, parent_page_num: int, child_page_num: int) -> None:
        """Split the full internal node ``parent_page_num`` and add the child."""
        old_page_num = parent_page_num
        old_node = self._internal(old_page_num)
        old_max = self.node_max_key(old_node)
        child_max = self.node_max_key(self.get_page(child_page_num))
        new_page_num = self.unused_page_num()
        splitting_root = old_node.header.is_root

        if splitting_root:
            self.create_new_root(new_page_num)
            parent_of_old = ROOT_PAGE_NUM
            old_page_num = self._internal(ROOT_PAGE_NUM).child_page_num(0)
            old_node = self._internal(old_page_num)
        else:
            parent_of_old = old_node.header.parent_page_num
            new_node = self._initialize(new_page_num, NodeType.INTERNAL)
            new_node.header.parent_page_num = parent_of_old

        cur_page_num = old_node.header.right_child_page_num
        self.internal_node_insert(new_page_num, cur_page_num)
        self.get_page(cur_page_num).header.parent_page_num = new_page_num
        old_node.header.right_child_page_num = INVALID_PAGE_NUM

        for i in range(INTERNAL_NODE_MAX_KEYS - 1, INTERNAL_NODE_MAX_KEYS // 2, -1):
            cur_page_num = old_node.child_page_num(i)
            self.internal_node_insert(new_page_num, cur_page_num)
            self.get_page(cur_page_num).header.parent_page_num = new_page_num
            old_node.header.num_keys -= 1

        old_node.header.right_child_page_num = old_node.child_page_num(old_node.header.num_keys - 1)
        old_node.header.num_keys -= 1

        max_after_split = self.node_max_key(old_node)
        destination_page_num = old_page_num if child_max < max_after_split else new_page_num
        self.internal_node_insert(destination_page_num, child_page_num)
        self.get_page(child_page_num).header.parent_page_num = destination_page_num

        self.update_internal_node_key(parent_of_old, old_max, self.node_max_key(old_node))

        if not splitting_root:
            self.internal_node_insert(old_node.header.parent_page_num, new_page_num)

    def leaf_node_split_and_insert(self, cursor: CursorPosition, key: int, row: Row) -> None:
        """Split the full leaf under ``cursor`` in two and insert the new cell."""
        old_node = self._leaf(cursor.page_num)
        if not 0 <= cursor.cell_num <= LEAF_NODE_MAX_CELLS:
            raise IndexError("Cell index out of bounds")
        old_max = self.node_max_key(old_node)
        new_page_num = self.unused_page_num()
        new_node = self._initialize(new_page_num, NodeType.LEAF)
        new_node.header.parent_page_num = old_node.header.parent_page_num
        new_node.header.next_leaf_page_num = old_node.header.next_leaf_page_num
        old_node.header.next_leaf_page_num = new_page_num

        body_end = LEAF_NODE_CELL_OFFSET + LEAF_NODE_MAX_CELLS * LEAF_NODE_CELL_SIZE
        body = bytes(old_node.page[LEAF_NODE_CELL_OFFSET:body_end])
        cells = [
            body[start:start + LEAF_NODE_CELL_SIZE]
            for start in range(0, len(body), LEAF_NODE_CELL_SIZE)
        ]
        cells.insert(cursor.cell_num, _encode_cell(key, row))

        halves = (
            (old_node, cells[:LEAF_NODE_LEFT_SPLIT_COUNT]),
            (new_node, cells[LEAF_NODE_LEFT_SPLIT_COUNT:]),
        )
        for destination, chunk in halves:
            data = b"".join(chunk)
            destination.page[LEAF_NODE_CELL_OFFSET:LEAF_NODE_CELL_OFFSET + len(data)] = data
            destination.header.num_cells = len(chunk)

        if old_node.header.is_root:
            self.create_new_root(new_page_num)
        else:
            parent_page_num = old_node.header.parent_page_num
            self.update_internal_node_key(parent_page_num, old_max, self.node_max_key(old_node))
            self.internal_node_insert(parent_page_num, new_page_num)

    def update_internal_node_key(self, node_page_num: int, old_key: int, new_key: int) -> None:
        """Replace the key ``old_key`` of an internal node with ``new_key``."""
        node = self._internal(node_page_num)
        node.set_key(node.find_child_index(old_key), new_key)

    def close(self) -> None:
        """Write every cached page back and close the file."""
        if self._file.closed:
            return
        try:
            for page_num in range(self.num_pages):
                if self._pages[page_num] is not None:
                    self.flush_page(page_num)
            self._file.flush()
        finally:
            self._file.close()