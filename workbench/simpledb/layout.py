"""Page geometry, node types and the header stored at the start of every page."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

PAGE_SIZE = 4096
TABLE_MAX_PAGES = 400
COLUMN_USERNAME_SIZE = 32
COLUMN_EMAIL_SIZE = 255
INVALID_PAGE_NUM = 0xFFFFFFFF

NODE_TYPE_SIZE = 1
IS_ROOT_SIZE = 1
PARENT_POINTER_SIZE = 4
COMMON_NODE_HEADER_SIZE = NODE_TYPE_SIZE + IS_ROOT_SIZE + PARENT_POINTER_SIZE
# both node kinds follow the common header with two 32-bit fields
NODE_HEADER_SIZE = COMMON_NODE_HEADER_SIZE + 4 + 4

_HEADER = struct.Struct("<B?III")


class NodeType(IntEnum):
    """Kind of B-tree node stored in a page."""

    INTERNAL = 0
    LEAF = 1


@dataclass
class NodeHeader:
    """Header of a node page.

    Leaf nodes use ``num_cells`` and ``next_leaf_page_num``; internal nodes use
    ``num_keys`` and ``right_child_page_num``. Both pairs occupy the same bytes
    on disk.
    """

    type: NodeType = NodeType.LEAF
    is_root: bool = False
    parent_page_num: int = INVALID_PAGE_NUM
    num_cells: int = 0
    next_leaf_page_num: int = 0
    num_keys: int = 0
    right_child_page_num: int = INVALID_PAGE_NUM

    def read(self, page: bytes | bytearray | memoryview) -> NodeHeader:
        """Load the header fields from the start of ``page`` and return self."""
        type_byte, is_root, parent, first, second = _HEADER.unpack_from(page, 0)
        try:
            self.type = NodeType(type_byte)
        except ValueError:
            raise ValueError(f"unknown node type {type_byte}") from None
        self.is_root = is_root
        self.parent_page_num = parent
        if self.type is NodeType.LEAF:
            self.num_cells = first
            self.next_leaf_page_num = second
        else:
            self.num_keys = first
            self.right_child_page_num = second
        return self

    def write(self, page: bytearray | memoryview) -> None:
        """Store the header fields at the start of ``page``."""
        if self.type is NodeType.LEAF:
            first, second = self.num_cells, self.next_leaf_page_num
        else:
            first, second = self.num_keys, self.right_child_page_num
        _HEADER.pack_into(
            page, 0, int(self.type), self.is_root, self.parent_page_num, first, second
        )