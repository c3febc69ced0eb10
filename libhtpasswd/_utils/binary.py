from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from collections.abc import Iterator

#: hash64 alphabet shared by crypt(3) style hashes, also the salt alphabet
B64_CHARS = "./0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def _encode_bytes_little(
    next_value: Callable[[], int], chunks: int, tail: int
) -> Iterator[int]:
    """helper used by encode_bytes() to handle little-endian encoding"""
    #
    # output bit layout:
    #
    # first byte:   v1 543210
    #
    # second byte:  v1 ....76
    #              +v2 3210..
    #
    # third byte:   v2 ..7654
    #              +v3 10....
    #
    # fourth byte:  v3 765432
    #
    for _ in range(chunks):
        v1 = next_value()
        v2 = next_value()
        v3 = next_value()
        yield v1 & 0x3F
        yield ((v2 & 0x0F) << 2) | (v1 >> 6)
        yield ((v3 & 0x03) << 4) | (v2 >> 4)
        yield v3 >> 2
    if tail:
        v1 = next_value()
        if tail == 1:
            # note: 4 msb of last byte are padding
            yield v1 & 0x3F
            yield v1 >> 6
        else:
            assert tail == 2
            # note: 2 msb of last byte are padding
            v2 = next_value()
            yield v1 & 0x3F
            yield ((v2 & 0x0F) << 2) | (v1 >> 6)
            yield v2 >> 4


class Base64Engine:
    """little-endian base64 codec over a custom 64 character alphabet,
    as used by the md5-crypt family of hashes."""

    def __init__(self, charmap: str) -> None:
        if len(charmap) != 64:
            raise ValueError("charmap must be 64 characters in length")
        self._charmap = charmap.encode("latin-1")

    def encode_bytes(self, source: bytes) -> bytes:
        """encode bytes to base64 string.

        :arg source: byte string to encode.
        :returns: byte string containing encoded data.
        """
        chunks, tail = divmod(len(source), 3)
        next_value = iter(source).__next__
        gen = _encode_bytes_little(next_value, chunks, tail)
        return bytes(self._charmap[value] for value in gen)

    def encode_transposed_bytes(self, source: bytes, offsets: tuple[int, ...]) -> bytes:
        """encode byte string, first transposing source using offset list"""
        tmp = bytes(source[off] for off in offsets)
        return self.encode_bytes(tmp)


h64_engine = Base64Engine(B64_CHARS)
