from __future__ import annotations

from typing import Protocol

from libhtpasswd._utils.bytes import StrOrBytes

__all__ = ["PasswordHasher"]


class PasswordHasher(Protocol):
    def hash(self, secret: StrOrBytes, *, salt: str | None = None) -> str:
        """Hash secret, generating a fresh salt unless one is given."""
        ...

    def salt_from(self, hash: str) -> str | None:
        """Return the salt embedded in an existing hash, or None if the scheme is unsalted.

        :raises MalformedHashError: if the salt can't be used by this scheme.
        """
        ...
