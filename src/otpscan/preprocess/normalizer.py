"""Canonical message normalization.

:func:`normalize` turns a raw SMS/MMS body into the canonical form consumed by
every detection stage.  The transforms are applied in order:

1. **Zero-width removal** – ``\\u200b``, ``\\u200c``, ``\\u200d`` and ``\\ufeff``
   are deleted so that ``123\\u200b456`` reads as one digit run.
2. **Digit folding** – Arabic-Indic, Persian, N'Ko and fullwidth decimal digits
   become ASCII ``0-9``.  Folding is one-for-one and never changes length.
3. **Whitespace collapsing** – leading/trailing whitespace is trimmed and every
   maximal run of whitespace, line breaks included, becomes a single ASCII
   space.
4. **Length bound** – the result is truncated to ``max_length`` characters.

A lowercased copy is produced alongside for keyword search.  Characters whose
lowercase form has a different length (``"İ"`` for example) are kept as is so
that ``lower[i]`` always corresponds to ``text[i]``.

The function is pure, performs no I/O and accepts any string.

>>> normalize("  Your\\n\\nOTP   is ١٢٣٤٥٦ ")
NormalizedMessage(text='Your OTP is 123456', lower='your otp is 123456', changed=True)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..utils.constants import DIGIT_FOLD_TABLE, ZERO_WIDTHS

__all__ = ["NormalizedMessage", "fold_digits", "lower_aligned", "normalize"]

_WHITESPACE_RX: re.Pattern[str] = re.compile(r"\s+")
_ZERO_WIDTH_TABLE: dict[int, None] = {ord(ch): None for ch in ZERO_WIDTHS}


@dataclass(slots=True, frozen=True)
class NormalizedMessage:
    """Result of :func:`normalize`.

    Attributes
    ----------
    text:
        The normalized message; all candidate spans index into it.
    lower:
        Lowercased copy with ``len(lower) == len(text)``.
    changed:
        ``True`` if ``text`` differs from the raw input.
    """

    text: str
    lower: str
    changed: bool

    @property
    def is_empty(self) -> bool:
        return not self.text


def fold_digits(text: str) -> str:
    """Return ``text`` with supported non-ASCII decimal digits mapped to ASCII."""

    return text.translate(DIGIT_FOLD_TABLE)


def lower_aligned(text: str) -> str:
    """Lowercase ``text`` without changing its length."""

    lowered = text.lower()
    if len(lowered) == len(text):
        return lowered
    out: list[str] = []
    for ch in text:
        low = ch.lower()
        out.append(low if len(low) == 1 else ch)
    return "".join(out)


def normalize(text: str, max_length: int | None = None) -> NormalizedMessage:
    """Normalize ``text`` and return a :class:`NormalizedMessage`."""

    cleaned = fold_digits(text.translate(_ZERO_WIDTH_TABLE))
    collapsed = _WHITESPACE_RX.sub(" ", cleaned).strip()
    if max_length is not None and len(collapsed) > max_length:
        collapsed = collapsed[:max_length].rstrip()
    return NormalizedMessage(collapsed, lower_aligned(collapsed), collapsed != text)
