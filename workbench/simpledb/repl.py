"""Statement parsing and execution, and the interactive prompt of the database."""

from __future__ import annotations

import re
import sys
from typing import Iterator, Optional, Sequence, TextIO

from workbench.simpledb.cursor import Cursor
from workbench.simpledb.layout import COMMON_NODE_HEADER_SIZE
from workbench.simpledb.node import (
    LEAF_NODE_CELL_SIZE,
    LEAF_NODE_HEADER_SIZE,
    LEAF_NODE_MAX_CELLS,
    LEAF_NODE_SPACE_FOR_CELLS,
    LEAF_NODE_VALUE_SIZE,
    InternalNode,
    LeafNode,
)
from workbench.simpledb.pager import Pager
from workbench.simpledb.row import Row, Statement, StatementType
from workbench.simpledb.table import Table

DEFAULT_FILENAME = "Default.db"
PROMPT = "db > "

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class PrepareError(ValueError):
    """A statement could not be prepared; the message says why."""


class DuplicateKeyError(KeyError):
    """A row with the same id is already in the table."""


def format_row(row: Row) -> str:
    """Render a row as ``(id, username, email)``."""
    return f"({row.id}, {row.username}, {row.email})"


def constants_text() -> str:
    """The storage layout constants, one ``NAME: value`` per line."""
    constants = {
        "ROW_SIZE": LEAF_NODE_VALUE_SIZE,
        "COMMON_NODE_HEADER_SIZE": COMMON_NODE_HEADER_SIZE,
        "LEAF_NODE_HEADER_SIZE": LEAF_NODE_HEADER_SIZE,
        "LEAF_NODE_CELL_SIZE": LEAF_NODE_CELL_SIZE,
        "LEAF_NODE_SPACE_FOR_CELLS": LEAF_NODE_SPACE_FOR_CELLS,
        "LEAF_NODE_MAX_CELLS": LEAF_NODE_MAX_CELLS,
    }
    return "\n".join(f"{name}: {value}" for name, value in constants.items())


def _tree_lines(pager: Pager, page_num: int, level: int) -> Iterator[str]:
    indent = "  " * level
    node = pager.get_page(page_num)
    if isinstance(node, LeafNode):
        num_cells = node.header.num_cells
        yield f"{indent}- leaf (size {num_cells})"
        for i in range(num_cells):
            yield f"{indent}  - {node.key(i)}"
        return
    assert isinstance(node, InternalNode)
    num_keys = node.header.num_keys
    yield f"{indent}- internal (size {num_keys})"
    for i in range(num_keys):
        yield from _tree_lines(pager, node.child_page_num(i), level + 1)
        yield f"{indent}  - key {node.key(i)}"
    yield from _tree_lines(pager, node.header.right_child_page_num, level + 1)


def format_tree(pager: Pager, page_num: int = 0, indentation_level: int = 0) -> str:
    """Render the subtree in ``page_num`` as an indented outline."""
    return "\n".join(_tree_lines(pager, page_num, indentation_level))


def do_meta_command(command: str, table: Table) -> str:
    """Run a dot command and return the text it produces.

    ``.exit`` closes the table and raises SystemExit; an unknown command
    raises ValueError.
    """
    if command == ".exit":
        table.close()
        raise SystemExit(0)
    if command == ".btree":
        return "Tree:\n" + format_tree(table.pager, table.root_page_num, 0)
    if command == ".constants":
        return "Constants:\n" + constants_text()
    raise ValueError(f"Unrecognized command '{command}'")


def _prepare_insert(buffer: str) -> Statement:
    tokens = buffer.split()
    if len(tokens) < 4:
        raise PrepareError("Syntax error. Could not parse statement.")
    _, id_string, username, email = tokens[:4]
    match = _INT_PREFIX.match(id_string)
    if match is None:
        raise PrepareError("Syntax error. Could not parse statement.")
    row_id = int(match.group(1))
    if not _INT32_MIN <= row_id <= _INT32_MAX:
        raise PrepareError("Syntax error. Could not parse statement.")
    if row_id < 0:
        raise PrepareError("ID must be positive.")
    try:
        row = Row(row_id, username, email)
    except ValueError:
        raise PrepareError("String is too long.") from None
    return Statement(StatementType.INSERT, row)


def prepare_statement(buffer: str) -> Statement:
    """Parse an ``insert`` or ``select`` statement."""
    if buffer.startswith("insert"):
        return _prepare_insert(buffer)
    if buffer == "select":
        return Statement(StatementType.SELECT)
    raise PrepareError(f"Unrecognized keyword at start of '{buffer}'.")


def _execute_insert(statement: Statement, table: Table) -> None:
    row = statement.row_to_insert
    cursor = Cursor(table).find(row.id)
    node = table.pager.get_page(cursor.page_num)
    if not isinstance(node, LeafNode):
        return
    num_cells = node.header.num_cells
    if cursor.cell_num < num_cells and node.key(cursor.cell_num) == row.id:
        raise DuplicateKeyError(row.id)
    if num_cells >= LEAF_NODE_MAX_CELLS:
        table.pager.leaf_node_split_and_insert(cursor, row.id, row)
    else:
        node.insert_at(cursor.cell_num, row.id, row)


def execute_statement(statement: Statement, table: Table) -> list[Row]:
    """Run a statement; a select returns its rows, an insert returns none."""
    if statement.type is StatementType.INSERT:
        _execute_insert(statement, table)
        return []
    return list(table)


def _run(table: Table, stream: TextIO) -> None:
    while True:
        print(PROMPT, end="", flush=True)
        line = stream.readline()
        if not line:
            print()
            return
        buffer = line.rstrip("\r\n")
        if buffer.startswith("."):
            try:
                output = do_meta_command(buffer, table)
            except ValueError as exc:
                print(exc)
                continue
            print(output)
            continue
        try:
            statement = prepare_statement(buffer)
        except PrepareError as exc:
            print(exc)
            continue
        try:
            rows = execute_statement(statement, table)
        except DuplicateKeyError:
            print("Error: Duplicate key.")
            continue
        for row in rows:
            print(format_row(row))
        print("Executed.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the prompt on the database file named in ``argv`` (or the default)."""
    args = list(sys.argv[1:] if argv is None else argv)
    filename = args[0] if args else DEFAULT_FILENAME
    with Table(filename) as table:
        try:
            _run(table, sys.stdin)
        except SystemExit as exc:
            return exc.code if isinstance(exc.code, int) else 0
    return 0