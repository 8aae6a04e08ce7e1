import pytest

from workbench.simpledb.cursor import Cursor
from workbench.simpledb.repl import execute_statement, prepare_statement
from workbench.simpledb.row import Row
from workbench.simpledb.table import Table


def _row(key):
    return Row(key, f"user{key}", f"person{key}@example.com")


@pytest.fixture
def table(tmp_path):
    t = Table(tmp_path / "cursor.db")
    yield t
    t.close()


def _fill_leaf(table, keys):
    leaf = table.pager.get_page(0)
    for key in keys:
        leaf.insert_at(leaf.find_cell_index(key), key, _row(key))


def _insert(table, key):
    statement = prepare_statement(f"insert {key} user{key} person{key}@example.com")
    execute_statement(statement, table)


def test_find_on_empty_table(table):
    cursor = Cursor(table).find(42)
    assert (cursor.page_num, cursor.cell_num, cursor.end_of_table) == (0, 0, False)


def test_find_existing_and_missing_keys(table):
    _fill_leaf(table, [5, 1, 3])
    assert Cursor(table).find(3).cell_num == 1
    assert Cursor(table).find(4).cell_num == 2
    assert Cursor(table).find(9).cell_num == 3


def test_value_reads_row(table):
    _fill_leaf(table, [2, 4])
    cursor = Cursor(table).find(4)
    assert cursor.value() == _row(4)


def test_advance_walks_leaf_and_ends(table):
    _fill_leaf(table, [2, 1])
    cursor = Cursor(table)
    ids = []
    while not cursor.end_of_table:
        ids.append(cursor.value().id)
        cursor.advance()
    assert ids == [1, 2]
    assert cursor.end_of_table


def test_value_out_of_bounds_raises(table):
    with pytest.raises(IndexError):
        Cursor(table).value()


def test_find_descends_tree(table):
    for key in range(1, 21):
        _insert(table, key)
    for key in range(1, 21):
        cursor = Cursor(table).find(key)
        assert cursor.page_num != 0
        assert cursor.value().id == key


def test_advance_follows_next_leaf(table):
    for key in range(20, 0, -1):
        _insert(table, key)
    cursor = table.start()
    ids = []
    while not cursor.end_of_table:
        ids.append(cursor.value().id)
        cursor.advance()
    assert ids == list(range(1, 21))


def test_cursor_on_internal_page(table):
    for key in range(1, 15):
        _insert(table, key)
    cursor = Cursor(table, page_num=0)
    assert cursor.value() is None
    cursor.advance()
    assert (cursor.page_num, cursor.cell_num, cursor.end_of_table) == (0, 0, False)