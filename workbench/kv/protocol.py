"""Request parsing and response serialisation for the key-value wire protocol.

All integers on the wire are little-endian.
"""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import Union

MAX_MSG = 32 << 20
MAX_ARGS = 200 * 1000

_U32 = struct.Struct("<I")
_I64 = struct.Struct("<q")
_DBL = struct.Struct("<d")

Buffer = bytearray
BytesLike = Union[bytes, bytearray, memoryview]


class ErrorCode(IntEnum):
    """Error codes carried by an error response."""

    UNKNOWN = 1
    TOO_BIG = 2
    BAD_TYP = 3
    BAD_ARG = 4


class Tag(IntEnum):
    """Type tags of serialised values."""

    NIL = 0
    ERR = 1
    STR = 2
    INT = 3
    DBL = 4
    ARR = 5


class ProtocolError(ValueError):
    """Raised when a request cannot be parsed."""


def parse_req(data: BytesLike) -> list[bytes]:
    """Split a request body into its argument strings."""
    view = memoryview(bytes(data))
    pos = 0

    def read_u32() -> int:
        nonlocal pos
        if pos + 4 > len(view):
            raise ProtocolError("truncated length field")
        (value,) = _U32.unpack_from(view, pos)
        pos += 4
        return value

    nstr = read_u32()
    if nstr > MAX_ARGS:
        raise ProtocolError("too many arguments")
    out: list[bytes] = []
    while len(out) < nstr:
        length = read_u32()
        if pos + length > len(view):
            raise ProtocolError("truncated argument")
        out.append(bytes(view[pos:pos + length]))
        pos += length
    if pos != len(view):
        raise ProtocolError("trailing garbage")
    return out


def _as_bytes(s: Union[str, BytesLike]) -> bytes:
    return s.encode("utf-8") if isinstance(s, str) else bytes(s)


def out_nil(buf: Buffer) -> None:
    """Append a nil value."""
    buf.append(Tag.NIL)


def out_str(buf: Buffer, s: Union[str, BytesLike]) -> None:
    """Append a string value."""
    data = _as_bytes(s)
    buf.append(Tag.STR)
    buf += _U32.pack(len(data))
    buf += data


def out_int(buf: Buffer, val: int) -> None:
    """Append a signed 64-bit integer value."""
    buf.append(Tag.INT)
    buf += _I64.pack(val)


def out_dbl(buf: Buffer, val: float) -> None:
    """Append a double value."""
    buf.append(Tag.DBL)
    buf += _DBL.pack(val)


def out_err(buf: Buffer, code: int, msg: Union[str, BytesLike]) -> None:
    """Append an error value with a code and message."""
    data = _as_bytes(msg)
    buf.append(Tag.ERR)
    buf += _U32.pack(code)
    buf += _U32.pack(len(data))
    buf += data


def out_arr(buf: Buffer, n: int) -> None:
    """Append an array header announcing ``n`` elements."""
    buf.append(Tag.ARR)
    buf += _U32.pack(n)


def out_begin_arr(buf: Buffer) -> int:
    """Append an array header whose size is filled in later; return its context."""
    buf.append(Tag.ARR)
    buf += _U32.pack(0)
    return len(buf) - 4


def out_end_arr(buf: Buffer, ctx: int, n: int) -> None:
    """Fill in the element count of an array started with ``out_begin_arr``."""
    if buf[ctx - 1] != Tag.ARR:
        raise ValueError("context does not point at an array header")
    _U32.pack_into(buf, ctx, n)