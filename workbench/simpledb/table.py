"""The single table of the database, stored as a B-tree in a file."""

from __future__ import annotations

import os
from types import TracebackType
from typing import Iterator, Optional, Type, Union

from workbench.simpledb.cursor import Cursor
from workbench.simpledb.node import InternalNode
from workbench.simpledb.pager import ROOT_PAGE_NUM, Pager
from workbench.simpledb.row import Row


class Table:
    """A table of rows kept in a database file."""

    def __init__(self, filename: Union[str, os.PathLike[str]]) -> None:
        self.pager = Pager(filename)
        self.root_page_num = ROOT_PAGE_NUM
        if self.pager.num_pages == 0:
            # a new database file: page 0 becomes an empty root leaf
            self.pager.get_page(self.root_page_num).header.is_root = True

    def start(self) -> Cursor:
        """A cursor on the first row of the table."""
        page_num = self.root_page_num
        node = self.pager.get_page(page_num)
        while isinstance(node, InternalNode):
            page_num = node.child_page_num(0)
            node = self.pager.get_page(page_num)
        return Cursor(self, page_num, 0, node.header.num_cells == 0)

    def __iter__(self) -> Iterator[Row]:
        """Rows in key order."""
        cursor = self.start()
        while not cursor.end_of_table:
            row = cursor.value()
            if row is not None:
                yield row
            cursor.advance()

    def close(self) -> None:
        """Write every page back to the file and close it."""
        self.pager.close()

    def __enter__(self) -> Table:
        return self

    def __exit__(
        self,
        *args: Union[Optional[Type[BaseException]], Optional[BaseException], Optional[TracebackType]],
    ) -> None:
        self.close()