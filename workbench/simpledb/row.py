"""Table rows and prepared statements."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from workbench.simpledb.layout import COLUMN_EMAIL_SIZE, COLUMN_USERNAME_SIZE

_MAX_ID = 0xFFFFFFFF


@dataclass
class Row:
    """A record of the single table: an id, a username and an e-mail address."""

    id: int = 0
    username: str = ""
    email: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.id <= _MAX_ID:
            raise ValueError("Id out of range.")
        if len(self.username.encode("utf-8")) > COLUMN_USERNAME_SIZE:
            raise ValueError("Username too long.")
        if len(self.email.encode("utf-8")) > COLUMN_EMAIL_SIZE:
            raise ValueError("Email too long.")


class StatementType(Enum):
    """Kinds of statements the database understands."""

    INSERT = auto()
    SELECT = auto()


@dataclass
class Statement:
    """A parsed statement, with the row to insert for INSERT statements."""

    type: StatementType
    row_to_insert: Row = field(default_factory=Row)