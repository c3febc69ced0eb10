"""libhtpasswd.codec -- hash scheme dispatch for credential file passwords"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Union

import typing_extensions

from libhtpasswd._salt import generate_salt
from libhtpasswd.errors import UnknownSchemeError
from libhtpasswd.hashers.des_crypt import DesCryptHasher
from libhtpasswd.hashers.md5_crypt import AprMD5Hasher
from libhtpasswd.hashers.misc import LdapSHA1Hasher, PlaintextHasher

if TYPE_CHECKING:
    from libhtpasswd._salt import SaltGenerator
    from libhtpasswd._utils.bytes import StrOrBytes
    from libhtpasswd.hashers.abc import PasswordHasher

__all__ = [
    "Scheme",
    "SchemeLike",
    "DEFAULT_SCHEME",
    "DEFAULT_CHECK_ORDER",
    "get_hasher",
    "encrypt",
]


class Scheme(str, enum.Enum):
    """hash schemes understood in a credential file"""

    PLAIN = "plain"
    CRYPT = "crypt"
    MD5 = "md5"
    SHA1 = "sha1"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: SchemeLike) -> Scheme:
        """convert scheme name to :class:`Scheme`

        :raises UnknownSchemeError: if the name isn't a supported scheme.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownSchemeError(value) from None


SchemeLike = Union[Scheme, str]

DEFAULT_SCHEME = Scheme.CRYPT
DEFAULT_CHECK_ORDER = (Scheme.MD5, Scheme.SHA1, Scheme.CRYPT, Scheme.PLAIN)


def get_hasher(
    scheme: SchemeLike, salt_generator: SaltGenerator = generate_salt
) -> PasswordHasher:
    scheme = Scheme.parse(scheme)
    if scheme is Scheme.PLAIN:
        return PlaintextHasher()
    if scheme is Scheme.CRYPT:
        return DesCryptHasher(salt_generator=salt_generator)
    if scheme is Scheme.MD5:
        return AprMD5Hasher(salt_generator=salt_generator)
    if scheme is Scheme.SHA1:
        return LdapSHA1Hasher()
    typing_extensions.assert_never(scheme)


def encrypt(
    scheme: SchemeLike,
    password: StrOrBytes,
    existing_hash: str | None = None,
    *,
    salt_generator: SaltGenerator = generate_salt,
) -> str:
    """Hash ``password`` using ``scheme``.

    :arg existing_hash:
        Optional hash to take the salt from. When given, the result depends only
        on scheme, password and that salt, so it can be compared with the
        existing hash to check a password. Otherwise salted schemes
        draw a fresh salt from ``salt_generator``.

    :raises UnknownSchemeError: if scheme isn't one of :class:`Scheme`.
    :raises MalformedHashError: if the scheme can't use the salt of ``existing_hash``.
    """
    hasher = get_hasher(scheme, salt_generator)
    salt = hasher.salt_from(existing_hash) if existing_hash else None
    return hasher.hash(password, salt=salt)
