from __future__ import annotations

import pytest

from libhtpasswd.codec import DEFAULT_CHECK_ORDER, Scheme, encrypt, get_hasher
from libhtpasswd.errors import MalformedHashError, UnknownSchemeError
from libhtpasswd.hashers.des_crypt import DesCryptHasher
from libhtpasswd.hashers.md5_crypt import AprMD5Hasher
from libhtpasswd.hashers.misc import LdapSHA1Hasher, PlaintextHasher
from tests.utils_ import fixed_salt


def test_default_check_order() -> None:
    assert DEFAULT_CHECK_ORDER == (Scheme.MD5, Scheme.SHA1, Scheme.CRYPT, Scheme.PLAIN)


@pytest.mark.parametrize(
    ("name", "scheme"),
    [
        ("plain", Scheme.PLAIN),
        ("crypt", Scheme.CRYPT),
        ("md5", Scheme.MD5),
        ("sha1", Scheme.SHA1),
        (Scheme.MD5, Scheme.MD5),
    ],
)
def test_parse_scheme(name: str, scheme: Scheme) -> None:
    assert Scheme.parse(name) is scheme
    assert str(scheme) == scheme.value


@pytest.mark.parametrize("name", ["bcrypt", "MD5", "", "apr_md5_crypt"])
def test_unknown_scheme(name: str) -> None:
    with pytest.raises(UnknownSchemeError) as exc_info:
        encrypt(name, "password")
    assert exc_info.value.scheme == name
    assert isinstance(exc_info.value, ValueError)


@pytest.mark.parametrize(
    ("scheme", "hasher_cls"),
    [
        ("plain", PlaintextHasher),
        ("crypt", DesCryptHasher),
        ("md5", AprMD5Hasher),
        ("sha1", LdapSHA1Hasher),
    ],
)
def test_get_hasher(scheme: str, hasher_cls: type) -> None:
    assert isinstance(get_hasher(scheme), hasher_cls)


@pytest.mark.parametrize(
    ("scheme", "password", "hash"),
    [
        ("crypt", "pass2", "2CHkkwa2AtqGs"),
        ("sha1", "pass3", "{SHA}3ipNV1GrBtxPmHFC21fCbVCSXIo="),
        ("plain", "pass4", "pass4"),
        ("md5", "pass1", "$apr1$t4tc7jTh$GPIWVUo8sQKJlUdV8V5vu0"),
    ],
)
def test_existing_hash_reproduces(scheme: str, password: str, hash: str) -> None:
    assert encrypt(scheme, password, hash) == hash


@pytest.mark.parametrize("scheme", list(Scheme))
def test_salt_round_trip(scheme: Scheme) -> None:
    hash = encrypt(scheme, "frobnicate")
    assert encrypt(scheme, "frobnicate", hash) == hash
    assert encrypt(scheme, "frobnicate", encrypt(scheme, "frobnicate", hash)) == hash


@pytest.mark.parametrize(
    ("scheme", "expected"),
    [
        ("crypt", "sa"),
        ("md5", "$apr1$saltsalt$"),
    ],
)
def test_salt_generator(scheme: str, expected: str) -> None:
    hash = encrypt(scheme, "password", salt_generator=fixed_salt)
    assert hash.startswith(expected)
    assert hash == encrypt(scheme, "password", salt_generator=fixed_salt)


def test_fresh_salt_when_existing_hash_empty() -> None:
    assert encrypt("crypt", "password", "", salt_generator=fixed_salt).startswith("sa")


def test_sha1_ignores_existing_hash() -> None:
    assert encrypt("sha1", "pass3", "whatever") == "{SHA}3ipNV1GrBtxPmHFC21fCbVCSXIo="


def test_crypt_rejects_foreign_salt() -> None:
    with pytest.raises(MalformedHashError):
        encrypt("crypt", "pass3", "{SHA}3ipNV1GrBtxPmHFC21fCbVCSXIo=")
