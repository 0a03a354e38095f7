"""
Address LatLon Converter — Decoder
===================================
Turns raw CSV bytes into text for a caller-selected encoding.

Only the two encodings offered to users are accepted.  ``Shift_JIS`` is
decoded with Python's ``cp932`` codec (Windows-31J), the superset that
browser decoders use for the "Shift_JIS" label, so NEC/IBM extension
characters such as ``①`` or ``㈱`` decode instead of failing.
"""

from __future__ import annotations

import re

from shared.python.exceptions import DecodeError

DEFAULT_ENCODING = "UTF-8"

# Canonical label → Python codec
_CODECS: dict[str, str] = {
    "UTF-8": "utf-8-sig",
    "Shift_JIS": "cp932",
}

_ALIASES: dict[str, str] = {
    "utf8": "UTF-8",
    "shiftjis": "Shift_JIS",
    "sjis": "Shift_JIS",
    "cp932": "Shift_JIS",
    "windows31j": "Shift_JIS",
}

SUPPORTED_ENCODINGS: tuple[str, ...] = tuple(_CODECS)

_LABEL_NOISE = re.compile(r"[\s_\-]+")


def normalize_encoding(name: str) -> str:
    """Return the canonical label (``"UTF-8"`` or ``"Shift_JIS"``) for *name*.

    Matching ignores case, whitespace, hyphens and underscores, so
    ``"utf8"``, ``"Shift-JIS"`` and ``"sjis"`` are all accepted.

    Raises:
        DecodeError: If *name* is not a supported encoding.
    """
    key = _LABEL_NOISE.sub("", (name or "").lower())
    label = _ALIASES.get(key)
    if label is None:
        raise DecodeError(
            name,
            f"unsupported encoding (choose one of: {', '.join(SUPPORTED_ENCODINGS)})",
        )
    return label


def decode(data: bytes, encoding_name: str) -> str:
    """Decode *data* strictly using the encoding called *encoding_name*.

    A UTF-8 byte-order mark, if present, is dropped.

    Args:
        data: Raw file contents.
        encoding_name: One of :data:`SUPPORTED_ENCODINGS` (or an alias).

    Returns:
        The decoded text.

    Raises:
        DecodeError: If the encoding is unsupported or *data* contains a
            byte sequence that is invalid for it.
    """
    label = normalize_encoding(encoding_name)
    try:
        return bytes(data).decode(_CODECS[label])
    except UnicodeDecodeError as exc:
        raise DecodeError(
            label,
            f"invalid byte sequence at position {exc.start}. "
            "Try selecting a different input encoding.",
        ) from exc
