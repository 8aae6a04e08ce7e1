"""B-tree nodes laid out inside fixed-size pages."""

from __future__ import annotations

import struct
from typing import ClassVar, Optional, Union

from workbench.simpledb.layout import (
    COLUMN_EMAIL_SIZE,
    COLUMN_USERNAME_SIZE,
    INVALID_PAGE_NUM,
    NODE_HEADER_SIZE,
    PAGE_SIZE,
    NodeHeader,
    NodeType,
)
from workbench.simpledb.row import Row

PageData = Union[bytes, bytearray, memoryview]

LEAF_NODE_KEY_SIZE = 4
LEAF_NODE_VALUE_SIZE = 4 + COLUMN_USERNAME_SIZE + 1 + COLUMN_EMAIL_SIZE + 1
LEAF_NODE_CELL_SIZE = LEAF_NODE_KEY_SIZE + LEAF_NODE_VALUE_SIZE
LEAF_NODE_HEADER_SIZE = NODE_HEADER_SIZE
LEAF_NODE_CELL_OFFSET = LEAF_NODE_HEADER_SIZE
LEAF_NODE_SPACE_FOR_CELLS = PAGE_SIZE - LEAF_NODE_HEADER_SIZE
LEAF_NODE_MAX_CELLS = LEAF_NODE_SPACE_FOR_CELLS // LEAF_NODE_CELL_SIZE

INTERNAL_NODE_CHILD_SIZE = 4
INTERNAL_NODE_KEY_SIZE = 4
INTERNAL_NODE_CELL_SIZE = INTERNAL_NODE_CHILD_SIZE + INTERNAL_NODE_KEY_SIZE
INTERNAL_NODE_HEADER_SIZE = NODE_HEADER_SIZE
INTERNAL_NODE_CELL_OFFSET = INTERNAL_NODE_HEADER_SIZE
INTERNAL_NODE_MAX_KEYS = 3
_INTERNAL_NODE_CELL_CAPACITY = (PAGE_SIZE - INTERNAL_NODE_HEADER_SIZE) // INTERNAL_NODE_CELL_SIZE

_U32 = struct.Struct("<I")
_ROW = struct.Struct(f"<I{COLUMN_USERNAME_SIZE + 1}s{COLUMN_EMAIL_SIZE + 1}s")


def _c_string(raw: bytes) -> str:
    return raw.partition(b"\0")[0].decode("utf-8")


class Node:
    """A page holding one B-tree node, with its header kept alongside."""

    node_type: ClassVar[NodeType]

    def __init__(
        self, page: Optional[PageData] = None, header: Optional[NodeHeader] = None
    ) -> None:
        if page is None:
            page = bytearray(PAGE_SIZE)
        elif not isinstance(page, bytearray):
            page = bytearray(page)
        if len(page) != PAGE_SIZE:
            raise ValueError(f"a page must be {PAGE_SIZE} bytes, got {len(page)}")
        self.page: bytearray = page
        self.header = header if header is not None else NodeHeader(type=self.node_type)
        if self.header.type is not self.node_type:
            raise ValueError(f"header describes a {self.header.type.name} node")


class LeafNode(Node):
    """A leaf node: sorted cells of (key, row)."""

    node_type = NodeType.LEAF

    @staticmethod
    def _cell_offset(cell_num: int) -> int:
        if not 0 <= cell_num < LEAF_NODE_MAX_CELLS:
            raise IndexError("Cell index out of bounds")
        return LEAF_NODE_CELL_OFFSET + cell_num * LEAF_NODE_CELL_SIZE

    def _used_cell_offset(self, cell_num: int) -> int:
        if cell_num >= self.header.num_cells:
            raise IndexError("Cell index out of bounds")
        return self._cell_offset(cell_num)

    def key(self, cell_num: int) -> int:
        """Key stored in cell ``cell_num``."""
        return _U32.unpack_from(self.page, self._cell_offset(cell_num))[0]

    def value(self, cell_num: int) -> Row:
        """Row stored in cell ``cell_num``."""
        start = self._used_cell_offset(cell_num) + LEAF_NODE_KEY_SIZE
        row_id, username, email = _ROW.unpack_from(self.page, start)
        return Row(row_id, _c_string(username), _c_string(email))

    def set_key(self, cell_num: int, key: int) -> None:
        """Overwrite the key of an occupied cell."""
        _U32.pack_into(self.page, self._used_cell_offset(cell_num), key)

    def set_value(self, cell_num: int, row: Row) -> None:
        """Overwrite the row of an occupied cell."""
        start = self._used_cell_offset(cell_num) + LEAF_NODE_KEY_SIZE
        _ROW.pack_into(
            self.page, start, row.id, row.username.encode("utf-8"), row.email.encode("utf-8")
        )

    def find_cell_index(self, key: int) -> int:
        """Index of ``key``, or of the cell where it would be inserted."""
        low, high = 0, self.header.num_cells
        while low != high:
            index = (low + high) // 2
            key_at_index = self.key(index)
            if key == key_at_index:
                return index
            if key < key_at_index:
                high = index
            else:
                low = index + 1
        return low

    def insert_at(self, cell_num: int, key: int, row: Row) -> None:
        """Insert a cell at ``cell_num``, shifting later cells to the right."""
        num_cells = self.header.num_cells
        if num_cells >= LEAF_NODE_MAX_CELLS:
            raise OverflowError("Leaf node is full")
        if not 0 <= cell_num <= num_cells:
            raise IndexError("Cell index out of bounds")
        start = self._cell_offset(cell_num)
        end = LEAF_NODE_CELL_OFFSET + num_cells * LEAF_NODE_CELL_SIZE
        self.page[start + LEAF_NODE_CELL_SIZE:end + LEAF_NODE_CELL_SIZE] = self.page[start:end]
        self.header.num_cells = num_cells + 1
        self.set_key(cell_num, key)
        self.set_value(cell_num, row)


class InternalNode(Node):
    """An internal node: (child, key) cells followed by a right child."""

    node_type = NodeType.INTERNAL

    @staticmethod
    def _cell_offset(index: int) -> int:
        if not 0 <= index < _INTERNAL_NODE_CELL_CAPACITY:
            raise IndexError("Tried to access child_num out of bounds")
        return INTERNAL_NODE_CELL_OFFSET + index * INTERNAL_NODE_CELL_SIZE

    def child_page_num(self, index: int) -> int:
        """Page number of child ``index``; index ``num_keys`` is the right child."""
        num_keys = self.header.num_keys
        if index > num_keys:
            raise IndexError("Tried to access child_num out of bounds")
        if index == num_keys:
            right_child = self.header.right_child_page_num
            if right_child == INVALID_PAGE_NUM:
                raise ValueError("Tried to access invalid right child")
            return right_child
        child = _U32.unpack_from(self.page, self._cell_offset(index))[0]
        if child == INVALID_PAGE_NUM:
            raise ValueError("Tried to access invalid child")
        return child

    def set_child_page_num(self, index: int, child_page_num: int) -> None:
        """Set child ``index``; index ``num_keys`` sets the right child."""
        num_keys = self.header.num_keys
        if index > num_keys:
            raise IndexError("Tried to access child_num out of bounds")
        if index == num_keys:
            self.header.right_child_page_num = child_page_num
        else:
            _U32.pack_into(self.page, self._cell_offset(index), child_page_num)

    def key(self, index: int) -> int:
        """Key of cell ``index``: the largest key under its child."""
        return _U32.unpack_from(self.page, self._cell_offset(index) + INTERNAL_NODE_CHILD_SIZE)[0]

    def set_key(self, index: int, key: int) -> None:
        """Set the key of cell ``index``."""
        _U32.pack_into(self.page, self._cell_offset(index) + INTERNAL_NODE_CHILD_SIZE, key)

    def find_child_index(self, key: int) -> int:
        """Index of the child whose subtree should contain ``key``."""
        low, high = 0, self.header.num_keys
        while low != high:
            index = (low + high) // 2
            if self.key(index) >= key:
                high = index
            else:
                low = index + 1
        return low


def node_from_page(page: PageData) -> Node:
    """Build the node described by the header at the start of ``page``."""
    header = NodeHeader().read(page)
    if header.type is NodeType.LEAF:
        return LeafNode(page, header)
    return InternalNode(page, header)