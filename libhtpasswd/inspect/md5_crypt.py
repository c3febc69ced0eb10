from __future__ import annotations

import dataclasses
import re

APR_MD5_MAGIC = "$apr1$"
MD5_SALT_SIZE = 8

APR_MD5_CRYPT_REGEX = re.compile(
    r"^\$apr1\$(?P<salt>[^$]{0,8})\$(?P<hash>[./0-9A-Za-z]{22})$"
)


@dataclasses.dataclass
class MD5CryptInfo:
    salt: str
    hash: str

    def as_str(self) -> str:
        return f"{APR_MD5_MAGIC}{self.salt}${self.hash}"


def inspect_apr_md5_crypt(hash: str) -> MD5CryptInfo | None:
    match = APR_MD5_CRYPT_REGEX.fullmatch(hash)
    if match is None:
        return None
    return MD5CryptInfo(salt=match.group("salt"), hash=match.group("hash"))


def extract_md5_salt(hash: str) -> str:
    """Pull a salt out of an arbitrary hash string.

    The ``$apr1$`` prefix is optional, and the salt runs up to the next ``$``
    (at most 8 characters), so any stored string yields a usable salt.
    """
    if hash.startswith(APR_MD5_MAGIC):
        hash = hash[len(APR_MD5_MAGIC) :]
    return hash.split("$", 1)[0][:MD5_SALT_SIZE]
