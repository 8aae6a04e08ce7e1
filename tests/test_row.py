import pytest

from workbench.simpledb.layout import COLUMN_EMAIL_SIZE, COLUMN_USERNAME_SIZE
from workbench.simpledb.row import Row, Statement, StatementType


def test_default_row_is_empty():
    assert Row() == Row(0, "", "")


def test_fields_are_kept():
    row = Row(3, "alice", "alice@example.com")
    assert (row.id, row.username, row.email) == (3, "alice", "alice@example.com")


def test_longest_fields_accepted():
    name = "u" * COLUMN_USERNAME_SIZE
    email = "e" * COLUMN_EMAIL_SIZE
    row = Row(1, name, email)
    assert row.username == name
    assert row.email == email


def test_username_too_long():
    with pytest.raises(ValueError, match="Username too long"):
        Row(1, "u" * (COLUMN_USERNAME_SIZE + 1), "a@example.com")


def test_email_too_long():
    with pytest.raises(ValueError, match="Email too long"):
        Row(1, "bob", "e" * (COLUMN_EMAIL_SIZE + 1))


def test_username_length_counts_encoded_bytes():
    with pytest.raises(ValueError):
        Row(1, "é" * (COLUMN_USERNAME_SIZE // 2 + 1), "a@example.com")


def test_negative_id_rejected():
    with pytest.raises(ValueError):
        Row(-1, "bob", "bob@example.com")


def test_statement_has_empty_row_by_default():
    statement = Statement(StatementType.SELECT)
    assert statement.type is StatementType.SELECT
    assert statement.row_to_insert == Row()


def test_statements_do_not_share_rows():
    first = Statement(StatementType.INSERT)
    second = Statement(StatementType.INSERT)
    first.row_to_insert.username = "carol"
    assert second.row_to_insert.username == ""