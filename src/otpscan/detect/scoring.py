"""Heuristic candidate scoring and winner selection.

Each candidate receives the sum of ten independent, additive signals.  There is
no early exit; every signal is evaluated for every candidate so that
:func:`score_breakdown` can report the full contribution table.

=====================  =======================================================
signal                 contribution
=====================  =======================================================
``length``             ``+3.0`` for 6 chars, ``+2.0`` for 4–8, ``+1.0`` for
                       3–10, ``-1.0`` otherwise
``numeric``            ``+0.5`` for numeric candidates
``long_numeric``       ``-1.5`` for numeric candidates of 9+ digits
``exact_line``         ``+2.5`` when the trimmed local line equals the code
``line_keyword``       ``+2.0`` when the local line mentions otp/code/password
``assignment``         ``+1.5`` for ``:``, ``is`` or ``=`` right before the code
``keyword_proximity``  ``+2.0``/``+1.0``/``+0.5`` within 20/40/80 characters of
                       an OTP keyword
``safety``             ``+1.0`` when any safety keyword occurs in the message
``money``              ``-2.0`` when a money indicator is near the candidate
``phone_shape``        ``-2.5`` for phone-like prefixes or 9+ digit numbers
=====================  =======================================================

The local line is found by expanding from the candidate span to the nearest
newline.  The normalized message no longer contains newlines, so in practice
the local line is the whole message.  Line-level inputs (the trimmed line, the
keyword check and the set of assigned values) are therefore computed once per
line by :class:`LineIndex` and shared by every candidate, which keeps scoring
linear in the message length.
"""

from __future__ import annotations

import re
from bisect import bisect_left
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from .base import Candidate, LineContext, ScoredCandidate

__all__ = [
    "LineIndex",
    "LineSignals",
    "extract_line_context",
    "has_indicator_near",
    "keyword_centers",
    "looks_like_phone_number",
    "min_keyword_distance",
    "pick_winner",
    "score_breakdown",
    "score_candidate",
]

LINE_KEYWORD_RX: re.Pattern[str] = re.compile(r"(otp|code|password|passcode)", re.IGNORECASE)

# A value is assigned when it follows ":", "is" or "=" plus optional whitespace.
ASSIGNMENT_MARKER_RX: re.Pattern[str] = re.compile(r"(?::|is|=)\s*")

# Longest code answered from the per-line table; longer codes are searched.
MAX_INDEXED_CODE_LENGTH = 10

EXACT_LINE_BONUS = 2.5
LINE_KEYWORD_BONUS = 2.0
ASSIGNMENT_BONUS = 1.5
NUMERIC_BONUS = 0.5
LONG_NUMERIC_PENALTY = -1.5
SAFETY_BONUS = 1.0
MONEY_PENALTY = -2.0
PHONE_PENALTY = -2.5

# (max distance, bonus), checked in order.
PROXIMITY_TIERS: tuple[tuple[int, float], ...] = ((20, 2.0), (40, 1.0), (80, 0.5))

DEFAULT_MONEY_RADIUS = 25
DEFAULT_PHONE_PREFIX_WINDOW = 5


def length_score(length: int) -> float:
    if length == 6:
        return 3.0
    if 4 <= length <= 8:
        return 2.0
    if 3 <= length <= 10:
        return 1.0
    return -1.0


def extract_line_context(text: str, start: int, end: int) -> LineContext:
    """Return the newline-delimited line around the inclusive span ``[start, end]``."""

    line_start = text.rfind("\n", 0, start) + 1
    nl = text.find("\n", end + 1)
    line_end = len(text) - 1 if nl < 0 else nl - 1
    return LineContext(text[line_start : line_end + 1], line_start, line_end)


def _assignment_rx(code: str) -> re.Pattern[str]:
    return re.compile(r"(:|is|=)\s*" + re.escape(code))


@dataclass(slots=True, frozen=True)
class LineSignals:
    """Line-level scoring inputs shared by every candidate on one line.

    ``assigned`` holds every prefix, up to :data:`MAX_INDEXED_CODE_LENGTH`
    characters, of the text right after an assignment marker and its
    whitespace.  Codes never contain whitespace, so a code is assigned exactly
    when it is one of those prefixes.
    """

    context: LineContext
    stripped: str
    has_keyword: bool
    assigned: frozenset[str]

    @classmethod
    def of(cls, context: LineContext) -> "LineSignals":
        line = context.line
        assigned: set[str] = set()
        for m in ASSIGNMENT_MARKER_RX.finditer(line):
            pos = m.end()
            stop = min(pos + MAX_INDEXED_CODE_LENGTH, len(line))
            for end in range(pos + 1, stop + 1):
                assigned.add(line[pos:end])
        return cls(
            context=context,
            stripped=line.strip(),
            has_keyword=LINE_KEYWORD_RX.search(line) is not None,
            assigned=frozenset(assigned),
        )

    def is_assigned(self, code: str) -> bool:
        """Return ``True`` if ``code`` directly follows ``:``, ``is`` or ``=``."""

        if 0 < len(code) <= MAX_INDEXED_CODE_LENGTH:
            return code in self.assigned
        return _assignment_rx(code).search(self.context.line) is not None


class LineIndex:
    """Per-message cache of :class:`LineSignals` keyed by line span.

    Newline offsets are collected once so each lookup is a pair of bisections;
    the signals for a line are built the first time a candidate lands on it.
    The index must be built from the same text the candidates index into.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self._newlines = [idx for idx, char in enumerate(text) if char == "\n"]
        self._lines: dict[tuple[int, int], LineSignals] = {}

    def _span(self, start: int, end: int) -> tuple[int, int]:
        before = bisect_left(self._newlines, start)
        line_start = self._newlines[before - 1] + 1 if before else 0
        after = bisect_left(self._newlines, end + 1)
        if after < len(self._newlines):
            return line_start, self._newlines[after] - 1
        return line_start, len(self.text) - 1

    def signals_for(self, candidate: Candidate) -> LineSignals:
        """Return the shared signals of the line holding ``candidate``."""

        key = self._span(candidate.start_index, candidate.end_index)
        line_start, line_end = key
        cached = self._lines.get(key)
        if cached is None:
            context = LineContext(self.text[line_start : line_end + 1], line_start, line_end)
            cached = self._lines[key] = LineSignals.of(context)
        return cached


def keyword_centers(lower: str, keywords: Iterable[str]) -> list[int]:
    """Return the sorted midpoints of all keyword occurrences in ``lower``.

    Occurrences of one keyword are searched without overlap.
    """

    centers: list[int] = []
    for keyword in keywords:
        if not keyword:
            continue
        index = lower.find(keyword)
        while index >= 0:
            centers.append(index + len(keyword) // 2)
            index = lower.find(keyword, index + len(keyword))
    centers.sort()
    return centers


def min_keyword_distance(candidate: Candidate, centers: Sequence[int]) -> int | None:
    """Return the distance from the candidate midpoint to the nearest keyword."""

    if not centers:
        return None
    center = (candidate.start_index + candidate.end_index) // 2
    pos = bisect_left(centers, center)
    best: int | None = None
    for idx in (pos - 1, pos):
        if 0 <= idx < len(centers):
            distance = abs(center - centers[idx])
            if best is None or distance < best:
                best = distance
    return best


def has_indicator_near(
    lower: str, indicators: Iterable[str], index: int, radius: int
) -> bool:
    """Return ``True`` if an indicator occurs within ``radius`` of ``index``."""

    start = max(index - radius, 0)
    end = min(index + radius, len(lower))
    if start >= end:
        return False
    window = lower[start:end]
    return any(ind and ind in window for ind in indicators)


def looks_like_phone_number(
    candidate: Candidate, text: str, window: int = DEFAULT_PHONE_PREFIX_WINDOW
) -> bool:
    """Return ``True`` for a ``+``/``tel``/``call`` prefix or a 9+ digit number."""

    start = candidate.start_index
    prefix = text[max(start - window, 0) : start]
    if "+" in prefix:
        return True
    prefix = prefix.lower()
    if "tel" in prefix or "call" in prefix:
        return True
    return candidate.is_numeric and candidate.length >= 9


def score_breakdown(
    candidate: Candidate,
    text: str,
    lower: str,
    otp_centers: Sequence[int],
    money_indicators: Iterable[str],
    *,
    has_safety_keyword: bool,
    money_radius: int = DEFAULT_MONEY_RADIUS,
    phone_prefix_window: int = DEFAULT_PHONE_PREFIX_WINDOW,
    lines: LineIndex | None = None,
) -> dict[str, float]:
    """Return the contribution of every signal for ``candidate``.

    Pass one ``lines`` index built from ``text`` when scoring several
    candidates of the same message so line-level work is shared.
    """

    code = candidate.code
    length = candidate.length
    signals: dict[str, float] = {"length": length_score(length)}

    signals["numeric"] = NUMERIC_BONUS if candidate.is_numeric else 0.0
    signals["long_numeric"] = (
        LONG_NUMERIC_PENALTY if candidate.is_numeric and length >= 9 else 0.0
    )

    line = (lines if lines is not None else LineIndex(text)).signals_for(candidate)
    signals["exact_line"] = EXACT_LINE_BONUS if line.stripped == code else 0.0
    signals["line_keyword"] = LINE_KEYWORD_BONUS if line.has_keyword else 0.0
    signals["assignment"] = ASSIGNMENT_BONUS if line.is_assigned(code) else 0.0

    proximity = 0.0
    distance = min_keyword_distance(candidate, otp_centers)
    if distance is not None:
        for limit, bonus in PROXIMITY_TIERS:
            if distance <= limit:
                proximity = bonus
                break
    signals["keyword_proximity"] = proximity

    signals["safety"] = SAFETY_BONUS if has_safety_keyword else 0.0
    signals["money"] = (
        MONEY_PENALTY
        if has_indicator_near(lower, money_indicators, candidate.start_index, money_radius)
        else 0.0
    )
    signals["phone_shape"] = (
        PHONE_PENALTY if looks_like_phone_number(candidate, text, phone_prefix_window) else 0.0
    )
    return signals


def score_candidate(
    candidate: Candidate,
    text: str,
    lower: str,
    otp_centers: Sequence[int],
    money_indicators: Iterable[str],
    *,
    has_safety_keyword: bool,
    money_radius: int = DEFAULT_MONEY_RADIUS,
    phone_prefix_window: int = DEFAULT_PHONE_PREFIX_WINDOW,
    lines: LineIndex | None = None,
) -> ScoredCandidate:
    """Return a scored copy of ``candidate`` along with its signal breakdown."""

    signals = score_breakdown(
        candidate,
        text,
        lower,
        otp_centers,
        money_indicators,
        has_safety_keyword=has_safety_keyword,
        money_radius=money_radius,
        phone_prefix_window=phone_prefix_window,
        lines=lines,
    )
    return ScoredCandidate(replace(candidate, score=sum(signals.values())), signals)


def pick_winner(scored: Sequence[ScoredCandidate]) -> ScoredCandidate:
    """Return the highest scoring entry; ties go to the earliest extracted."""

    if not scored:
        raise ValueError("no candidates to choose from")
    best = scored[0]
    for item in scored[1:]:
        if item.candidate.score > best.candidate.score:
            best = item
    return best
