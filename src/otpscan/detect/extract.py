"""Candidate code extraction.

Candidates are produced by three independent passes over the normalized
message whose results are concatenated in pass order:

``numeric`` -> ``grouped`` -> ``alnum``

1. **numeric** – maximal runs of 3–10 ASCII digits.  Boundaries are
   digit/non-digit rather than word boundaries so digits glued to CJK
   ideographs (``验证码654321``) still qualify.
2. **grouped** – two or more chunks of 2–4 digits joined by a single space or
   dash (``123 456``, ``12-34-56``).  Separators are stripped; the result is kept
   when it is 4–8 digits long and not already produced by an earlier pass.
3. **alnum** – word-bounded ASCII tokens of 4–10 characters with at least two
   digits and at least one non-digit.

Before matching, obvious noise is masked with spaces: URLs, bare domains,
quote characters and the phrase ``share OTP``.  Masking preserves length, so
spans index directly into the unmasked normalized text.  All patterns use
bounded quantifiers and scan in linear time.
"""

from __future__ import annotations

import re

from .base import Candidate

__all__ = ["extract_candidates", "mask_noise"]

NUMERIC_RX: re.Pattern[str] = re.compile(r"(?<![0-9])[0-9]{3,10}(?![0-9])")
GROUPED_RX: re.Pattern[str] = re.compile(r"\b[0-9]{2,4}(?:[ -][0-9]{2,4})+\b")
ALNUM_RX: re.Pattern[str] = re.compile(r"\b[0-9A-Za-z]{4,10}\b")

_SEPARATOR_RX: re.Pattern[str] = re.compile(r"[ -]")

_NOISE_RXS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:https?://|www\.)[^\s]{1,2048}", re.IGNORECASE),
    re.compile(r"\b[a-zA-Z0-9][a-zA-Z0-9-]{0,61}\.[a-zA-Z]{2,24}\b(?:/[^\s]{0,2048})?"),
    re.compile(r"[\"'`‘’“”]"),
    re.compile(r"share OTP", re.IGNORECASE),
)


def _blank(match: re.Match[str]) -> str:
    return " " * (match.end() - match.start())


def mask_noise(text: str) -> str:
    """Return ``text`` with URLs, domains and quotes replaced by spaces."""

    for rx in _NOISE_RXS:
        text = rx.sub(_blank, text)
    return text


def _numeric_pass(scan: str) -> list[Candidate]:
    return [
        Candidate(
            code=m.group(),
            start_index=m.start(),
            end_index=m.end() - 1,
            is_numeric=True,
            source="numeric",
        )
        for m in NUMERIC_RX.finditer(scan)
    ]


def _grouped_pass(scan: str, seen: set[str]) -> list[Candidate]:
    found: list[Candidate] = []
    for m in GROUPED_RX.finditer(scan):
        code = _SEPARATOR_RX.sub("", m.group())
        if not 4 <= len(code) <= 8 or code in seen:
            continue
        seen.add(code)
        found.append(
            Candidate(
                code=code,
                start_index=m.start(),
                end_index=m.end() - 1,
                is_numeric=True,
                source="grouped",
            )
        )
    return found


def _alnum_pass(scan: str) -> list[Candidate]:
    found: list[Candidate] = []
    for m in ALNUM_RX.finditer(scan):
        token = m.group()
        digits = sum(ch.isdigit() for ch in token)
        # Purely numeric tokens belong to the numeric pass.
        if digits < 2 or digits == len(token):
            continue
        found.append(
            Candidate(
                code=token,
                start_index=m.start(),
                end_index=m.end() - 1,
                is_numeric=False,
                source="alnum",
            )
        )
    return found


def extract_candidates(text: str) -> list[Candidate]:
    """Extract code candidates from the normalized ``text``.

    The returned list preserves pass order and, within a pass, left-to-right
    order; winner selection relies on it for tie-breaking.  An empty list means
    no candidate was found.
    """

    scan = mask_noise(text)
    candidates = _numeric_pass(scan)
    seen = {c.code for c in candidates}
    candidates.extend(_grouped_pass(scan, seen))
    candidates.extend(_alnum_pass(scan))
    return candidates
