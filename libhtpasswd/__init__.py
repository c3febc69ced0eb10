"""libhtpasswd -- read, verify and atomically modify Apache style credential files"""

from libhtpasswd.codec import DEFAULT_CHECK_ORDER, DEFAULT_SCHEME, Scheme, encrypt
from libhtpasswd.context import HashPolicy
from libhtpasswd.errors import (
    DuplicateUserError,
    HtpasswdError,
    InvalidFieldError,
    MalformedHashError,
    UnknownSchemeError,
    UserNotFoundError,
)
from libhtpasswd.record import UserRecord
from libhtpasswd.store import CredentialStore

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CHECK_ORDER",
    "DEFAULT_SCHEME",
    "CredentialStore",
    "DuplicateUserError",
    "HashPolicy",
    "HtpasswdError",
    "InvalidFieldError",
    "MalformedHashError",
    "Scheme",
    "UnknownSchemeError",
    "UserNotFoundError",
    "UserRecord",
    "encrypt",
]
