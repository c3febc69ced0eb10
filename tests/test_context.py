from __future__ import annotations

import pytest

from libhtpasswd.codec import Scheme
from libhtpasswd.context import HashPolicy
from libhtpasswd.errors import UnknownSchemeError
from tests.utils_ import SAMPLE_01, SAMPLE_USERS


def _sample_hashes() -> dict[str, str]:
    return dict(line.split(":", 1) for line in SAMPLE_01.splitlines())


def test_no_schemes_provided() -> None:
    with pytest.raises(ValueError, match="At least one scheme must be supplied"):
        HashPolicy(check_order=[])


def test_unknown_schemes() -> None:
    with pytest.raises(UnknownSchemeError):
        HashPolicy(default_scheme="bcrypt")
    with pytest.raises(UnknownSchemeError):
        HashPolicy(check_order=["md5", "sha256"])


def test_single_scheme_name_as_check_order() -> None:
    assert HashPolicy(check_order="sha1").check_order == (Scheme.SHA1,)


@pytest.mark.parametrize("user", sorted(SAMPLE_USERS))
def test_verify(user: str) -> None:
    policy = HashPolicy()
    hash = _sample_hashes()[user]
    password = "pass" + user[-1]
    assert policy.verify(password, hash)
    assert not policy.verify("pass9", hash)
    assert policy.identify(password, hash) is Scheme.parse(SAMPLE_USERS[user])


def test_verify_restricted_check_order() -> None:
    policy = HashPolicy()
    assert policy.verify("pass4", "pass4")
    assert not policy.verify("pass4", "pass4", check_order=["crypt"])
    assert not policy.verify("pass4", "pass4", check_order=["md5", "sha1"])


def test_verify_skips_schemes_that_cannot_parse_hash() -> None:
    # "$a" isn't a valid des_crypt salt
    policy = HashPolicy(check_order=["crypt", "md5"])
    assert policy.verify("pass1", "$apr1$t4tc7jTh$GPIWVUo8sQKJlUdV8V5vu0")


def test_hash_uses_default_scheme() -> None:
    policy = HashPolicy(default_scheme="sha1")
    assert policy.hash("pass3") == "{SHA}3ipNV1GrBtxPmHFC21fCbVCSXIo="
    assert policy.hash("pass3", scheme="plain") == "pass3"


def test_copy() -> None:
    policy = HashPolicy(default_scheme="md5", check_order=["md5"])
    clone = policy.copy(default_scheme="plain")
    assert clone.default_scheme is Scheme.PLAIN
    assert clone.check_order == (Scheme.MD5,)
    assert policy.default_scheme is Scheme.MD5
    assert policy.copy().check_order == policy.check_order
    repr(policy)
