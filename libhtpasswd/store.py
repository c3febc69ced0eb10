"""libhtpasswd.store -- read, verify & atomically rewrite htpasswd style files"""

from __future__ import annotations

import contextlib
import os
import shutil
import stat
from os import PathLike
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO, Union

from libhtpasswd._logging import logger
from libhtpasswd._salt import generate_salt
from libhtpasswd._utils.bytes import is_ascii_codec
from libhtpasswd.codec import DEFAULT_CHECK_ORDER, DEFAULT_SCHEME
from libhtpasswd.context import HashPolicy
from libhtpasswd.errors import DuplicateUserError, UserNotFoundError
from libhtpasswd.record import UserRecord, validate_username

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from libhtpasswd._salt import SaltGenerator
    from libhtpasswd._utils.bytes import StrOrBytes
    from libhtpasswd.codec import Scheme, SchemeLike

__all__ = ["CredentialStore"]

#: suffix of the sibling file a rewrite is streamed into
_SUFFIX = ".new"

_NEWLINE = "\n"
_CRLF = "\r\n"
_COLON = ":"

#: undecodable bytes are carried through as lone surrogates and written back unchanged
_ERRORS = "surrogateescape"

UserOrRecord = Union[str, UserRecord]


def _line_ending(line: str) -> str:
    if line.endswith(_CRLF):
        return _CRLF
    return _NEWLINE


class CredentialStore:
    """Handle on an Apache style credential file (``user:hash[:extra_info]`` per line).

    Nothing is cached: every call scans the file from the top, and every
    change streams the file into ``<path>.new`` and renames it over the
    original once complete. Untouched lines, including blank and malformed
    ones, are copied byte for byte. If anything goes wrong the temporary file
    is removed and the original is left as it was.

    Only one writer per file is assumed; there is no locking between processes.

    :arg path: path of the credential file. It must exist unless ``create=True``.
    :arg default_scheme: scheme used to hash new passwords (``crypt`` by default).
    :arg check_order: schemes tried, in order, when checking a password.
    :param encoding: text encoding of the file, must be ascii compatible.
    :param create: create an empty file if ``path`` doesn't exist.
    :param salt_generator: ``(length, chars) -> str`` source of salts.
    """

    def __init__(
        self,
        path: str | PathLike,
        default_scheme: SchemeLike = DEFAULT_SCHEME,
        check_order: Iterable[SchemeLike] = DEFAULT_CHECK_ORDER,
        *,
        encoding: str = "utf-8",
        create: bool = False,
        salt_generator: SaltGenerator = generate_salt,
    ) -> None:
        if not path:
            raise TypeError("'path' is required")
        if not encoding:
            raise TypeError("'encoding' is required")
        if not is_ascii_codec(encoding):
            # the ":" separator must stay a single byte
            raise ValueError("encoding must be 7-bit ascii compatible")

        self._path = Path(path)
        self.encoding = encoding
        self.policy = HashPolicy(
            default_scheme=default_scheme,
            check_order=check_order,
            salt_generator=salt_generator,
        )

        if create:
            try:
                with open(self._path, "x", encoding=encoding):
                    logger.debug("created empty credential file %s", self._path)
            except FileExistsError:
                pass

    def __repr__(self) -> str:
        tail = f" path={str(self._path)!r} default_scheme={self.default_scheme.value}"
        if self.encoding != "utf-8":
            tail += f" encoding={self.encoding!r}"
        return f"<{self.__class__.__name__} 0x{id(self):0x}{tail}>"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def default_scheme(self) -> Scheme:
        return self.policy.default_scheme

    @property
    def check_order(self) -> tuple[Scheme, ...]:
        return self.policy.check_order

    # ------------------------------------------------------------------
    # inspection
    # ------------------------------------------------------------------

    def lookup_user(self, username: str) -> UserRecord | None:
        """Return record for ``username``, or ``None`` if not present.

        If the username occurs on several lines the first one wins.
        The record is bound to this store, so changing it rewrites the file.
        """
        username = validate_username(username)
        with self._open() as fh:
            for _, record in self._scan(fh):
                if record is not None and record.username == username:
                    return record._bind(self)
        return None

    def __contains__(self, username: str) -> bool:
        return self.lookup_user(username) is not None

    def users(self) -> list[str]:
        """Return usernames in file order (duplicates listed once)"""
        seen: dict[str, None] = {}
        with self._open() as fh:
            for _, record in self._scan(fh):
                if record is not None:
                    seen.setdefault(record.username)
        return list(seen)

    def check_user_password(self, username: str, password: StrOrBytes) -> bool:
        """Verify password for user using the store's check order.

        Shortcut for ``lookup_user(username).verify_password(password)``.

        :raises UserNotFoundError: if the user isn't in the file.
        """
        record = self.lookup_user(username)
        if record is None:
            raise UserNotFoundError(username, self._path)
        return record.verify_password(password)

    # ------------------------------------------------------------------
    # modification
    # ------------------------------------------------------------------

    def add_user(
        self,
        user: UserOrRecord,
        password: StrOrBytes | None = None,
        extra_info: str | None = None,
        **options: Any,
    ) -> None:
        """Append a record for a new user.

        ``user`` is either a username, used with ``password`` & ``extra_info``
        (and the ``scheme``, ``check_order`` or ``hashed_password`` options),
        or a ready built :class:`UserRecord`.

        :raises DuplicateUserError: if the user already exists; the file is left unchanged.
        """
        record = self._get_user(user, password, extra_info, **options)
        with self._start_rewrite() as (old, new):
            last = ""
            for line, existing in self._scan(old):
                if existing is not None and existing.username == record.username:
                    raise DuplicateUserError(record.username, self._path)
                new.write(line)
                last = line
            self._append(new, last, record)

    def update_user(
        self,
        user: UserOrRecord,
        password: StrOrBytes | None = None,
        extra_info: str | None = None,
        **options: Any,
    ) -> bool:
        """Replace the record for a user, adding it if not present.

        Arguments are the same as for :meth:`add_user`. If the new record
        has no extra_info, the one already in the file is kept (in the
        file only, a :class:`UserRecord` passed in is not modified).

        :returns:
            * ``True`` if an existing record was replaced.
            * ``False`` if the record was appended.
        """
        record = self._get_user(user, password, extra_info, **options)
        return self._rewrite_record(record, record.username, keep_extra_info=True)

    def delete_user(self, user: UserOrRecord) -> bool:
        """Remove user's record; deleting an absent user is not an error.

        :returns:
            * ``True`` if the user was removed.
            * ``False`` if the user wasn't found.
        """
        if isinstance(user, UserRecord):
            username = user.username
        else:
            username = validate_username(user)

        removed = 0
        with self._start_rewrite() as (old, new):
            for line, existing in self._scan(old):
                if existing is not None and existing.username == username:
                    removed += 1
                    continue
                new.write(line)
        if removed > 1:
            logger.warning(
                "username occurred multiple times in %s, removed all %d: %r",
                self._path,
                removed,
                username,
            )
        return bool(removed)

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _get_user(
        self,
        user: UserOrRecord,
        password: StrOrBytes | None,
        extra_info: str | None,
        scheme: SchemeLike | None = None,
        check_order: Iterable[SchemeLike] | None = None,
        hashed_password: str | None = None,
    ) -> UserRecord:
        if isinstance(user, UserRecord):
            return user
        return UserRecord(
            user,
            password,
            extra_info,
            hashed_password=hashed_password,
            policy=self.policy.copy(default_scheme=scheme, check_order=check_order),
        )

    def _write_record(self, record: UserRecord, stored_username: str) -> None:
        """write-through target for bound records"""
        self._rewrite_record(record, stored_username, keep_extra_info=False)

    def _rewrite_record(
        self, record: UserRecord, match: str, keep_extra_info: bool
    ) -> bool:
        """Substitute every line keyed by ``match`` with ``record``, append if none."""
        seen = 0
        replacement = record.to_line()
        with self._start_rewrite() as (old, new):
            last = ""
            for line, existing in self._scan(old):
                last = line
                if existing is None:
                    new.write(line)
                elif existing.username == match:
                    if (
                        not seen
                        and keep_extra_info
                        and record.extra_info is None
                        and existing.extra_info is not None
                    ):
                        # merged into the written line only, ``record`` is left as given
                        replacement += _COLON + existing.extra_info
                    seen += 1
                    new.write(replacement + _line_ending(line))
                elif existing.username == record.username:
                    # renamed onto another user's name
                    raise DuplicateUserError(record.username, self._path)
                else:
                    new.write(line)
            if not seen:
                self._append(new, last, record)
        if seen > 1:
            logger.warning(
                "username occurs multiple times in %s, replaced all %d: %r",
                self._path,
                seen,
                match,
            )
        return bool(seen)

    @staticmethod
    def _append(new: TextIO, last: str, record: UserRecord) -> None:
        if last and not last.endswith(_NEWLINE):
            # keep the appended record off the unterminated last line
            new.write(_NEWLINE)
        new.write(record.to_line() + _NEWLINE)

    def _open(self) -> TextIO:
        # newline="" leaves line endings untranslated, so lines copy verbatim
        return open(self._path, encoding=self.encoding, errors=_ERRORS, newline="")

    def _scan(self, fh: TextIO) -> Iterator[tuple[str, UserRecord | None]]:
        """yield each raw line, with its parsed record (``None`` for blank/malformed lines)"""
        for line in fh:
            yield line, UserRecord.from_line(line, policy=self.policy)

    @property
    def _temp_path(self) -> Path:
        return self._path.with_name(self._path.name + _SUFFIX)

    @contextlib.contextmanager
    def _start_rewrite(self) -> Iterator[tuple[TextIO, TextIO]]:
        """Stream old file into a sibling temp file, then swap it into place.

        Any exception raised inside the block discards the temp file,
        leaving the original untouched, and is re-raised.
        """
        temp_path = self._temp_path
        try:
            mode = stat.S_IMODE(os.stat(self._path).st_mode)

            def opener(path: str, flags: int) -> int:
                return os.open(path, flags, mode)

            with self._open() as old, open(
                temp_path,
                "w",
                encoding=self.encoding,
                errors=_ERRORS,
                newline="",
                opener=opener,
            ) as new:
                # a stale temp file keeps its old mode, so copy it before any line is written
                shutil.copymode(self._path, temp_path)
                yield old, new
                new.flush()
                os.fsync(new.fileno())
            # both handles are closed before the swap
            os.replace(temp_path, self._path)
        except BaseException as err:
            logger.debug("aborting rewrite of %s: %r", self._path, err)
            with contextlib.suppress(FileNotFoundError):
                os.unlink(temp_path)
            raise
        logger.debug("rewrote %s", self._path)
