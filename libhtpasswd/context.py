from __future__ import annotations

from typing import TYPE_CHECKING

from libhtpasswd._logging import logger
from libhtpasswd._salt import generate_salt
from libhtpasswd._utils.bytes import consteq
from libhtpasswd.codec import (
    DEFAULT_CHECK_ORDER,
    DEFAULT_SCHEME,
    Scheme,
    encrypt,
)
from libhtpasswd.errors import MalformedHashError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from libhtpasswd._salt import SaltGenerator
    from libhtpasswd._utils.bytes import StrOrBytes
    from libhtpasswd.codec import SchemeLike

__all__ = ["HashPolicy"]


def _parse_check_order(check_order: Iterable[SchemeLike] | SchemeLike) -> tuple[Scheme, ...]:
    if isinstance(check_order, str):
        # single scheme name, not an iterable of characters
        check_order = (check_order,)
    return tuple(Scheme.parse(scheme) for scheme in check_order)


class HashPolicy:
    """Scheme used for new hashes, plus the ordered schemes tried when verifying.

    Modelled on a crypt context: the default scheme hashes, the check order
    verifies. Verification re-hashes the password with each scheme in turn,
    reusing the salt of the stored hash, and stops at the first exact match.
    """

    def __init__(
        self,
        default_scheme: SchemeLike = DEFAULT_SCHEME,
        check_order: Iterable[SchemeLike] = DEFAULT_CHECK_ORDER,
        salt_generator: SaltGenerator = generate_salt,
    ) -> None:
        self._default_scheme = Scheme.parse(default_scheme)
        self._check_order = _parse_check_order(check_order)
        self._salt_generator = salt_generator

        self._validate_init()

    def __repr__(self) -> str:
        order = ", ".join(scheme.value for scheme in self._check_order)
        return f"<{self.__class__.__name__} default={self._default_scheme.value} check_order=[{order}]>"

    @property
    def default_scheme(self) -> Scheme:
        return self._default_scheme

    @property
    def check_order(self) -> tuple[Scheme, ...]:
        return self._check_order

    @property
    def salt_generator(self) -> SaltGenerator:
        return self._salt_generator

    def copy(
        self,
        default_scheme: SchemeLike | None = None,
        check_order: Iterable[SchemeLike] | None = None,
    ) -> HashPolicy:
        """return copy of policy, with the given settings replaced"""
        return HashPolicy(
            default_scheme=self._default_scheme if default_scheme is None else default_scheme,
            check_order=self._check_order if check_order is None else check_order,
            salt_generator=self._salt_generator,
        )

    def hash(self, secret: StrOrBytes, scheme: SchemeLike | None = None) -> str:
        """hash secret with a fresh salt, using the default scheme unless one is given"""
        return encrypt(
            scheme or self._default_scheme,
            secret,
            salt_generator=self._salt_generator,
        )

    def identify(
        self,
        secret: StrOrBytes,
        hash: str,
        check_order: Iterable[SchemeLike] | None = None,
    ) -> Scheme | None:
        """return first scheme in check order that reproduces ``hash`` from ``secret``"""
        schemes = self._check_order if check_order is None else _parse_check_order(check_order)
        for scheme in schemes:
            try:
                candidate = encrypt(scheme, secret, hash, salt_generator=self._salt_generator)
            except MalformedHashError:
                # stored hash can't have come from this scheme
                logger.debug("skipping %s, not usable with stored hash", scheme.value)
                continue
            if consteq(candidate, hash):
                return scheme
        return None

    def verify(
        self,
        secret: StrOrBytes,
        hash: str,
        check_order: Iterable[SchemeLike] | None = None,
    ) -> bool:
        return self.identify(secret, hash, check_order) is not None

    def _validate_init(self) -> None:
        if not self._check_order:
            raise ValueError("At least one scheme must be supplied")
