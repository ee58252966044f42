"""Percent-decoding of request paths."""

from __future__ import annotations

import string

HEX_DIGITS = frozenset(string.hexdigits)
PATH_ENCODING = "utf-8"


def percent_decode(raw: str) -> str:
    """
    Decode ``%XX`` escapes in ``raw``.

    Each escape contributes one byte; the resulting byte string is decoded as
    UTF-8 with ``surrogateescape`` so bytes that are not valid UTF-8 still map
    back to the same bytes when used as a filesystem path.

    A ``%`` consumes up to the next two characters. When they are not a valid
    hex pair the escape is dropped without emitting anything. Every other
    character passes through unchanged.
    """
    out = bytearray()
    i = 0
    length = len(raw)
    while i < length:
        ch = raw[i]
        if ch != "%":
            out += ch.encode(PATH_ENCODING, "surrogateescape")
            i += 1
            continue

        pair = raw[i + 1:i + 3]
        i += 1 + len(pair)
        if len(pair) == 2 and pair[0] in HEX_DIGITS and pair[1] in HEX_DIGITS:
            out.append(int(pair, 16))

    return out.decode(PATH_ENCODING, "surrogateescape")
