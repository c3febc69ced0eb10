from __future__ import annotations

import base64
import hashlib

from libhtpasswd._utils.bytes import StrOrBytes, as_bytes, as_str
from libhtpasswd.hashers.abc import PasswordHasher

__all__ = ["PlaintextHasher", "LdapSHA1Hasher"]

SHA1_PREFIX = "{SHA}"


class PlaintextHasher(PasswordHasher):
    """stores passwords as-is; apache only honours this on windows & netware"""

    def hash(self, secret: StrOrBytes, *, salt: str | None = None) -> str:
        return as_str(secret)

    def salt_from(self, hash: str) -> str | None:
        return None


class LdapSHA1Hasher(PasswordHasher):
    """unsalted ``{SHA}`` + base64 sha1 digest, as written by ``htpasswd -s``"""

    def hash(self, secret: StrOrBytes, *, salt: str | None = None) -> str:
        digest = hashlib.sha1(as_bytes(secret)).digest()
        return SHA1_PREFIX + base64.b64encode(digest).decode("ascii")

    def salt_from(self, hash: str) -> str | None:
        return None
