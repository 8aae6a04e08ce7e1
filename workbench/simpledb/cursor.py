"""A position inside the table's B-tree, used to read and place rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from workbench.simpledb.node import InternalNode, LeafNode
from workbench.simpledb.row import Row

if TYPE_CHECKING:
    from workbench.simpledb.table import Table


@dataclass
class Cursor:
    """Points at a cell of a leaf page, or past the end of the table."""

    table: Table = field(repr=False)
    page_num: int = 0
    cell_num: int = 0
    end_of_table: bool = False

    def value(self) -> Optional[Row]:
        """The row under the cursor; None if the cursor is not on a leaf page."""
        node = self.table.pager.get_page(self.page_num)
        if isinstance(node, LeafNode):
            return node.value(self.cell_num)
        return None

    def advance(self) -> None:
        """Move to the next cell, following the chain of leaves."""
        node = self.table.pager.get_page(self.page_num)
        if not isinstance(node, LeafNode):
            return
        self.cell_num += 1
        if self.cell_num >= node.header.num_cells:
            next_page_num = node.header.next_leaf_page_num
            if next_page_num == 0:
                self.end_of_table = True
            else:
                self.page_num = next_page_num
                self.cell_num = 0

    def find(self, key: int) -> Cursor:
        """Position on ``key``, or where it would be inserted; return self."""
        pager = self.table.pager
        page_num = self.table.root_page_num
        node = pager.get_page(page_num)
        while isinstance(node, InternalNode):
            page_num = node.child_page_num(node.find_child_index(key))
            node = pager.get_page(page_num)
        assert isinstance(node, LeafNode)
        self.page_num = page_num
        self.cell_num = node.find_cell_index(key)
        self.end_of_table = False
        return self