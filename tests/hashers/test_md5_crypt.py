from __future__ import annotations

import pytest

from libhtpasswd.hashers.md5_crypt import AprMD5Hasher
from libhtpasswd.inspect.md5_crypt import (
    MD5CryptInfo,
    extract_md5_salt,
    inspect_apr_md5_crypt,
)
from tests.utils_ import fixed_salt


@pytest.mark.parametrize(
    ("secret", "hash"),
    [
        ("myPassword", "$apr1$r31.....$HqJZimcKQFAMYayBlzkrA/"),
        ("pass1", "$apr1$t4tc7jTh$GPIWVUo8sQKJlUdV8V5vu0"),
    ],
)
def test_known_hashes(secret: str, hash: str) -> None:
    hasher = AprMD5Hasher()
    assert hasher.hash(secret, salt=hasher.salt_from(hash)) == hash
    assert hasher.hash(secret + "x", salt=hasher.salt_from(hash)) != hash


def test_fresh_salt() -> None:
    hasher = AprMD5Hasher()
    info = inspect_apr_md5_crypt(hasher.hash("password"))
    assert info
    assert len(info.salt) == 8
    assert hasher.hash("password") != hasher.hash("password")


def test_injected_salt_generator() -> None:
    hasher = AprMD5Hasher(salt_generator=fixed_salt)
    hash = hasher.hash("password")
    assert hash.startswith("$apr1$saltsalt$")
    assert hash == hasher.hash("password")


def test_bytes_and_str_secret_agree() -> None:
    hasher = AprMD5Hasher()
    assert hasher.hash("päss", salt="abcdefgh") == hasher.hash(
        "päss".encode(), salt="abcdefgh"
    )


@pytest.mark.parametrize(
    ("hash", "expected"),
    [
        ("$apr1$t4tc7jTh$GPIWVUo8sQKJlUdV8V5vu0", "t4tc7jTh"),
        ("$apr1$abc$whatever", "abc"),
        ("abcdefghijkl", "abcdefgh"),
        ("{SHA}3ipNV1GrBtxPmHFC21fCbVCSXIo=", "{SHA}3ip"),
        ("$apr1$", ""),
    ],
)
def test_extract_salt(hash: str, expected: str) -> None:
    assert extract_md5_salt(hash) == expected


def test_inspect() -> None:
    hash = "$apr1$t4tc7jTh$GPIWVUo8sQKJlUdV8V5vu0"
    info = inspect_apr_md5_crypt(hash)
    assert info == MD5CryptInfo(salt="t4tc7jTh", hash="GPIWVUo8sQKJlUdV8V5vu0")
    assert info.as_str() == hash
    assert inspect_apr_md5_crypt("$1$t4tc7jTh$GPIWVUo8sQKJlUdV8V5vu0") is None


@pytest.mark.parametrize("hash", ["{SHA}3ipNV1GrBtxPmHFC21fCbVCSXIo=", "pass:4", "päss"])
def test_salt_outside_hash64_alphabet(hash: str) -> None:
    hasher = AprMD5Hasher()
    salt = hasher.salt_from(hash)
    result = hasher.hash("password", salt=salt)
    assert result.startswith(f"$apr1${salt}$")
    assert result == hasher.hash("password", salt=salt)
