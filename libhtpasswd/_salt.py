from __future__ import annotations

import secrets
from typing import Callable

from libhtpasswd._utils.binary import B64_CHARS

SaltGenerator = Callable[[int, str], str]


def generate_salt(length: int, chars: str = B64_CHARS) -> str:
    return "".join(secrets.choice(chars) for _ in range(length))
