"""libhtpasswd.record -- a single ``user:hash[:extra_info]`` line"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from libhtpasswd.context import HashPolicy
from libhtpasswd.errors import InvalidFieldError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from typing_extensions import Self

    from libhtpasswd._utils.bytes import StrOrBytes
    from libhtpasswd.codec import Scheme, SchemeLike
    from libhtpasswd.store import CredentialStore

__all__ = ["UserRecord", "split_line"]

_COLON = ":"
_HASH = "#"

# characters that can't appear inside a field without corrupting the file
_INVALID_FIELD_CHARS = ":\r\n"

_SETTABLE_FIELDS = frozenset(["username", "hashed_password", "password", "extra_info"])

_default_policy = HashPolicy()


def _strip_newline(line: str) -> str:
    return line.rstrip("\r\n")


def split_line(line: str) -> tuple[str, str, str | None] | None:
    """split line into ``(username, hashed_password, extra_info)``.

    Only the first two colons separate fields, anything past the second
    belongs to extra_info. Returns ``None`` for lines holding no record
    (blank, "#" comment, no colon, or empty username), which callers pass
    through untouched.
    """
    line = _strip_newline(line)
    # NOTE: per htpasswd.c, lines with "#" as first non-whitespace char are comments
    if line.lstrip().startswith(_HASH):
        return None
    fields = line.split(_COLON, 2)
    if len(fields) < 2 or not fields[0]:
        return None
    if len(fields) == 2:
        return fields[0], fields[1], None
    return fields[0], fields[1], fields[2]


def _validate_field(value: Any, param: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{param} must be str, not {type(value).__name__}")
    if any(c in _INVALID_FIELD_CHARS for c in value):
        raise InvalidFieldError(f"{param} contains invalid characters: {value!r}")
    return value


def validate_username(username: Any) -> str:
    username = _validate_field(username, "username")
    if not username:
        raise InvalidFieldError("username must not be empty")
    if username.lstrip().startswith(_HASH):
        raise InvalidFieldError(f"username would be read back as a comment: {username!r}")
    return username


class UserRecord:
    """One record of a credential file.

    A record built directly is a plain value: changing its fields does no I/O.
    Records returned by :meth:`CredentialStore.lookup_user` are *bound* to
    their store, and every change made through the field setters,
    :meth:`set_password` or :meth:`set` is written to the file immediately.

    :arg username: record key, must be non-empty and free of ``:`` and line breaks.
    :arg password: plaintext password, hashed with ``scheme``.
    :arg extra_info: optional third field. ``None`` omits the field, ``""`` keeps an empty one.
    :param hashed_password: store this hash as-is instead of hashing ``password``.
    :param scheme: scheme for new hashes (defaults to ``crypt``).
    :param check_order: schemes tried by :meth:`verify_password`.
    :param policy: :class:`HashPolicy` to take scheme and check order from.
    """

    def __init__(
        self,
        username: str,
        password: StrOrBytes | None = None,
        extra_info: str | None = None,
        *,
        hashed_password: str | None = None,
        scheme: SchemeLike | None = None,
        check_order: Iterable[SchemeLike] | None = None,
        policy: HashPolicy | None = None,
    ) -> None:
        policy = policy or _default_policy
        if scheme is not None or check_order is not None:
            policy = policy.copy(default_scheme=scheme, check_order=check_order)
        self.policy = policy

        self._username = validate_username(username)
        if hashed_password is not None:
            self._hashed_password = _validate_field(hashed_password, "hashed_password")
        elif password is not None:
            self._hashed_password = policy.hash(password)
        else:
            raise TypeError("either password or hashed_password is required")
        self._extra_info = (
            None if extra_info is None else _validate_field(extra_info, "extra_info")
        )

        self._store: CredentialStore | None = None
        self._stored_username: str | None = None

    @classmethod
    def from_line(cls, line: str, policy: HashPolicy | None = None) -> Self | None:
        """parse a file line, returns ``None`` if the line holds no record"""
        fields = split_line(line)
        if fields is None:
            return None
        self = cls.__new__(cls)
        self.policy = policy or _default_policy
        # fields read from a file are taken verbatim; extra_info may hold colons
        self._username, self._hashed_password, self._extra_info = fields
        self._store = None
        self._stored_username = None
        return self

    def __repr__(self) -> str:
        tail = f" extra_info={self._extra_info!r}" if self._extra_info is not None else ""
        if self._store is not None:
            tail += f" store={self._store!r}"
        return f"<{self.__class__.__name__} {self._username!r}{tail}>"

    def __str__(self) -> str:
        return self.to_line()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserRecord):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    __hash__ = None  # type: ignore[assignment]

    def as_tuple(self) -> tuple[str, str, str | None]:
        return self._username, self._hashed_password, self._extra_info

    # ------------------------------------------------------------------
    # fields
    # ------------------------------------------------------------------

    @property
    def username(self) -> str:
        return self._username

    @username.setter
    def username(self, value: str) -> None:
        self.set(username=value)

    @property
    def hashed_password(self) -> str:
        return self._hashed_password

    @hashed_password.setter
    def hashed_password(self, value: str) -> None:
        self.set(hashed_password=value)

    @property
    def extra_info(self) -> str | None:
        return self._extra_info

    @extra_info.setter
    def extra_info(self, value: str | None) -> None:
        self.set(extra_info=value)

    @property
    def scheme(self) -> Scheme:
        return self.policy.default_scheme

    @property
    def check_order(self) -> tuple[Scheme, ...]:
        return self.policy.check_order

    @property
    def store(self) -> CredentialStore | None:
        """store this record writes through to, or ``None`` if unbound"""
        return self._store

    # ------------------------------------------------------------------
    # passwords
    # ------------------------------------------------------------------

    def verify_password(
        self, password: StrOrBytes, check_order: Iterable[SchemeLike] | None = None
    ) -> bool:
        """Check password against the stored hash.

        Each scheme of ``check_order`` (default: the record's own) is tried in
        turn, returning ``True`` on the first one that reproduces the stored hash.
        """
        return self.policy.verify(password, self._hashed_password, check_order)

    check_password = verify_password

    def set_password(self, password: StrOrBytes) -> None:
        """replace hash with a freshly salted hash of ``password``"""
        self.set(password=password)

    # ------------------------------------------------------------------
    # serialization & write-through
    # ------------------------------------------------------------------

    def to_line(self) -> str:
        """line for the credential file, without trailing newline"""
        fields = [self._username, self._hashed_password]
        if self._extra_info is not None:
            fields.append(self._extra_info)
        return _COLON.join(fields)

    def set(self, **fields: Any) -> None:
        """Change several fields at once; a bound record writes its file only once.

        Accepts ``username``, ``hashed_password``, ``password`` and ``extra_info``.
        If writing the file fails, the record keeps its previous values.
        """
        unknown = set(fields) - _SETTABLE_FIELDS
        if unknown:
            raise TypeError(f"unexpected fields: {', '.join(sorted(unknown))}")
        if "password" in fields and "hashed_password" in fields:
            raise TypeError("password and hashed_password are mutually exclusive")

        # validate everything before touching the record
        updates: dict[str, str | None] = {}
        if "username" in fields:
            updates["_username"] = validate_username(fields["username"])
        if "hashed_password" in fields:
            updates["_hashed_password"] = _validate_field(
                fields["hashed_password"], "hashed_password"
            )
        if "password" in fields:
            updates["_hashed_password"] = self.policy.hash(fields["password"])
        if "extra_info" in fields:
            value = fields["extra_info"]
            updates["_extra_info"] = None if value is None else _validate_field(value, "extra_info")

        previous = {name: getattr(self, name) for name in updates}
        for name, value in updates.items():
            setattr(self, name, value)
        try:
            self._write_through()
        except BaseException:
            for name, value in previous.items():
                setattr(self, name, value)
            raise

    def _bind(self, store: CredentialStore) -> Self:
        self._store = store
        self._stored_username = self._username
        return self

    def _write_through(self) -> None:
        if self._store is None:
            return
        assert self._stored_username is not None
        self._store._write_record(self, self._stored_username)
        self._stored_username = self._username
