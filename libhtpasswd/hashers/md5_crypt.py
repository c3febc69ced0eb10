from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from libhtpasswd._salt import generate_salt
from libhtpasswd._utils.binary import B64_CHARS, h64_engine
from libhtpasswd._utils.bytes import StrOrBytes, as_bytes
from libhtpasswd._utils.str import repeat_string
from libhtpasswd.hashers.abc import PasswordHasher
from libhtpasswd.inspect.md5_crypt import (
    APR_MD5_MAGIC,
    MD5_SALT_SIZE,
    MD5CryptInfo,
    extract_md5_salt,
)

if TYPE_CHECKING:
    from libhtpasswd._salt import SaltGenerator

__all__ = ["AprMD5Hasher"]

_MD5_ROUNDS = 1000

# map used to transpose bytes when encoding the final md5_crypt digest
_transpose_map = (12, 6, 0, 13, 7, 1, 14, 8, 2, 15, 9, 3, 5, 10, 4, 11)


def _md5_crypt(secret: bytes, salt: bytes, magic: bytes) -> str:
    """perform raw md5-crypt, as described by the FreeBSD md5crypt.c source

    this provides the digest portion only; the caller is responsible
    for assembling the ``$magic$salt$digest`` string.
    """
    secret_len = len(secret)

    # digest B - used as filler for digest A
    db = hashlib.md5(secret + salt + secret).digest()

    # digest A
    a_ctx = hashlib.md5(secret + magic + salt)
    if secret_len:
        a_ctx.update(repeat_string(db, secret_len))

    # NOTE: each set bit of the length adds a NUL byte, each clear bit the first char of the secret.
    first = secret[:1]
    i = secret_len
    while i:
        a_ctx.update(b"\x00" if i & 1 else first)
        i >>= 1
    dc = a_ctx.digest()

    # digest C - 1000 rounds mixing A, the salt and the secret
    for i in range(_MD5_ROUNDS):
        c_ctx = hashlib.md5(secret if i & 1 else dc)
        if i % 3:
            c_ctx.update(salt)
        if i % 7:
            c_ctx.update(secret)
        c_ctx.update(dc if i & 1 else secret)
        dc = c_ctx.digest()

    return h64_engine.encode_transposed_bytes(dc, _transpose_map).decode("ascii")


class AprMD5Hasher(PasswordHasher):
    """Apache's ``$apr1$`` variant of md5-crypt"""

    def __init__(self, salt_generator: SaltGenerator = generate_salt) -> None:
        self._salt_generator = salt_generator

    def hash(self, secret: StrOrBytes, *, salt: str | None = None) -> str:
        if salt is None:
            salt = self._salt_generator(MD5_SALT_SIZE, B64_CHARS)
        salt = salt[:MD5_SALT_SIZE]
        checksum = _md5_crypt(
            secret=as_bytes(secret),
            salt=as_bytes(salt),
            magic=APR_MD5_MAGIC.encode("ascii"),
        )
        return MD5CryptInfo(salt=salt, hash=checksum).as_str()

    def salt_from(self, hash: str) -> str | None:
        return extract_md5_salt(hash)
