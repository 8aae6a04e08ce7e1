import io

import pytest

from workbench.simpledb.repl import (
    DuplicateKeyError,
    PrepareError,
    constants_text,
    do_meta_command,
    execute_statement,
    format_row,
    format_tree,
    main,
    prepare_statement,
)
from workbench.simpledb.row import Row, StatementType
from workbench.simpledb.table import Table


@pytest.fixture
def table(tmp_path):
    t = Table(tmp_path / "repl.db")
    yield t
    t.close()


def _insert(table, key):
    statement = prepare_statement(f"insert {key} user{key} person{key}@example.com")
    return execute_statement(statement, table)


def test_format_row():
    row = Row(1, "user1", "person1@example.com")
    assert format_row(row) == "(1, user1, person1@example.com)"


def test_constants_text():
    lines = constants_text().splitlines()
    assert "ROW_SIZE: 293" in lines
    assert "LEAF_NODE_MAX_CELLS: 13" in lines
    assert len(lines) == 6


def test_prepare_insert():
    statement = prepare_statement("insert 12 alice alice@example.com")
    assert statement.type is StatementType.INSERT
    assert statement.row_to_insert == Row(12, "alice", "alice@example.com")


def test_prepare_insert_takes_leading_digits():
    statement = prepare_statement("insert 12abc bob bob@example.com")
    assert statement.row_to_insert.id == 12


def test_prepare_select():
    assert prepare_statement("select").type is StatementType.SELECT


@pytest.mark.parametrize(
    "buffer, message",
    [
        ("insert 1 alice", "Syntax error. Could not parse statement."),
        ("insert abc alice alice@example.com", "Syntax error. Could not parse statement."),
        ("insert 99999999999 a a@example.com", "Syntax error. Could not parse statement."),
        ("insert -1 alice alice@example.com", "ID must be positive."),
        ("insert 1 " + "a" * 33 + " alice@example.com", "String is too long."),
        ("update 1", "Unrecognized keyword at start of 'update 1'."),
    ],
)
def test_prepare_errors(buffer, message):
    with pytest.raises(PrepareError) as info:
        prepare_statement(buffer)
    assert str(info.value) == message


def test_insert_then_select(table):
    assert _insert(table, 2) == []
    _insert(table, 1)
    rows = execute_statement(prepare_statement("select"), table)
    assert [row.id for row in rows] == [1, 2]
    assert rows[0] == Row(1, "user1", "person1@example.com")


def test_duplicate_key(table):
    _insert(table, 3)
    with pytest.raises(DuplicateKeyError):
        _insert(table, 3)
    rows = execute_statement(prepare_statement("select"), table)
    assert [row.id for row in rows] == [3]


def test_duplicate_key_in_tree(table):
    for key in range(1, 15):
        _insert(table, key)
    with pytest.raises(DuplicateKeyError):
        _insert(table, 10)


def test_format_tree_single_leaf(table):
    for key in (3, 1, 2):
        _insert(table, key)
    assert format_tree(table.pager, 0, 0) == "- leaf (size 3)\n  - 1\n  - 2\n  - 3"


def test_format_tree_after_split(table):
    for key in range(1, 15):
        _insert(table, key)
    lines = format_tree(table.pager, 0, 0).splitlines()
    assert lines[0] == "- internal (size 1)"
    assert "  - key 7" in lines
    leaf_keys = [line.strip()[2:] for line in lines if line.startswith("    - ")]
    assert leaf_keys == [str(k) for k in range(1, 15)]


def test_meta_btree_and_constants(table):
    _insert(table, 1)
    assert do_meta_command(".btree", table) == "Tree:\n- leaf (size 1)\n  - 1"
    assert do_meta_command(".constants", table) == "Constants:\n" + constants_text()


def test_meta_unrecognized(table):
    with pytest.raises(ValueError, match="Unrecognized command '.foo'"):
        do_meta_command(".foo", table)


def test_meta_exit_closes_and_saves(tmp_path):
    path = tmp_path / "exit.db"
    table = Table(path)
    _insert(table, 4)
    with pytest.raises(SystemExit) as info:
        do_meta_command(".exit", table)
    assert info.value.code == 0
    with Table(path) as reopened:
        assert [row.id for row in reopened] == [4]


def test_main_session(tmp_path, monkeypatch, capsys):
    path = tmp_path / "main.db"
    script = "insert 1 alice alice@example.com\ninsert 1 alice alice@example.com\nselect\n.exit\n"
    monkeypatch.setattr("sys.stdin", io.StringIO(script))
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "Executed." in out
    assert "Error: Duplicate key." in out
    assert "(1, alice, alice@example.com)" in out
    with Table(path) as reopened:
        assert list(reopened) == [Row(1, "alice", "alice@example.com")]


def test_main_reports_bad_input(tmp_path, monkeypatch, capsys):
    path = tmp_path / "bad.db"
    monkeypatch.setattr("sys.stdin", io.StringIO(".nope\nhello\ninsert -5 a a@example.com\n"))
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "Unrecognized command '.nope'" in out
    assert "Unrecognized keyword at start of 'hello'." in out
    assert "ID must be positive." in out