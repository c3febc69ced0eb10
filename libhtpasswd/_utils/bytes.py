from __future__ import annotations

import hmac
from typing import Union

StrOrBytes = Union[str, bytes]

_ASCII_TEST_BYTES = b"\x00\n aA:#!\x7f"
_ASCII_TEST_UNICODE = _ASCII_TEST_BYTES.decode("ascii")


def as_bytes(value: StrOrBytes, encoding: str = "utf8") -> bytes:
    # lone surrogates hold raw bytes read from a file that wasn't valid text
    return value.encode(encoding, "surrogateescape") if isinstance(value, str) else value


def as_str(value: StrOrBytes, encoding: str = "utf8") -> str:
    return value.decode(encoding, "surrogateescape") if isinstance(value, bytes) else value


def consteq(left: str, right: str) -> bool:
    return hmac.compare_digest(as_bytes(left), as_bytes(right))


def is_ascii_codec(codec: str) -> bool:
    """Test if codec is compatible with 7-bit ascii (e.g. latin-1, utf-8; but not utf-16)"""
    try:
        return _ASCII_TEST_UNICODE.encode(codec) == _ASCII_TEST_BYTES
    except LookupError:
        return False
