from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from passlib.hash import des_crypt

from libhtpasswd._salt import generate_salt
from libhtpasswd._utils.binary import B64_CHARS
from libhtpasswd._utils.bytes import StrOrBytes, as_bytes
from libhtpasswd.errors import MalformedHashError
from libhtpasswd.hashers.abc import PasswordHasher

if TYPE_CHECKING:
    from libhtpasswd._salt import SaltGenerator

__all__ = ["DesCryptHasher", "DesCryptBackend", "passlib_des_crypt"]

DES_SALT_SIZE = 2

#: crypt(3) reads at most this many bytes of the secret
DES_SECRET_SIZE = 8

#: callable performing traditional crypt(3): ``backend(secret, salt) -> hash``
DesCryptBackend = Callable[[bytes, str], str]


def passlib_des_crypt(secret: bytes, salt: str) -> str:
    """default backend, using passlib's des_crypt handler

    (the stdlib ``crypt`` module is gone as of python 3.13,
    and was never available on windows)
    """
    return des_crypt.using(salt=salt).hash(secret)


def _validate_salt(salt: str) -> str:
    if len(salt) != DES_SALT_SIZE or any(c not in B64_CHARS for c in salt):
        raise MalformedHashError(f"invalid des_crypt salt: {salt!r}")
    return salt


class DesCryptHasher(PasswordHasher):
    """Traditional DES-based unix crypt, 2 char salt + 11 char checksum.

    Like crypt(3), the secret ends at the first NUL byte and only its
    first 8 bytes are significant.
    """

    def __init__(
        self,
        backend: DesCryptBackend = passlib_des_crypt,
        salt_generator: SaltGenerator = generate_salt,
    ) -> None:
        self._backend = backend
        self._salt_generator = salt_generator

    def hash(self, secret: StrOrBytes, *, salt: str | None = None) -> str:
        if salt is None:
            salt = self._salt_generator(DES_SALT_SIZE, B64_CHARS)
        secret = as_bytes(secret).split(b"\x00", 1)[0][:DES_SECRET_SIZE]
        return self._backend(secret, _validate_salt(salt))

    def salt_from(self, hash: str) -> str | None:
        return _validate_salt(hash[:DES_SALT_SIZE])
