"""libhtpasswd.errors -- exceptions raised by the credential file api"""

__all__ = [
    "HtpasswdError",
    "UnknownSchemeError",
    "MalformedHashError",
    "InvalidFieldError",
    "UserNotFoundError",
    "DuplicateUserError",
]


class HtpasswdError(Exception):
    """base class for all libhtpasswd errors"""


class UnknownSchemeError(HtpasswdError, ValueError):
    """error raised when a hash scheme name isn't one of the supported schemes"""

    def __init__(self, scheme: object) -> None:
        self.scheme = scheme
        super().__init__(f"unknown hash scheme: {scheme!r}")


class MalformedHashError(HtpasswdError, ValueError):
    """error raised when a hasher can't derive its salt from a hash string"""


class InvalidFieldError(HtpasswdError, ValueError):
    """error raised when a record field can't be stored in a credential file"""


class UserNotFoundError(HtpasswdError, KeyError):
    def __init__(self, username: str, path: object = None) -> None:
        self.username = username
        self.path = path
        super().__init__(username)

    def __str__(self) -> str:
        if self.path is None:
            return f"could not find user {self.username!r}"
        return f"could not find user {self.username!r} in {self.path}"


class DuplicateUserError(HtpasswdError, ValueError):
    def __init__(self, username: str, path: object = None) -> None:
        self.username = username
        self.path = path
        super().__init__(f"user {username!r} already exists in {path}")
