"""Core detection model and protocol definitions.

This module defines the strongly-typed primitives shared by the detection
stages.  Unlike half-open text spans elsewhere, candidate spans are
**inclusive** on both ends: ``start_index`` and ``end_index`` are the offsets of
the first and last character of the matched text within the normalized
message.  For grouped codes such as ``"123 456"`` the span covers the original
matched text while ``code`` holds the separator-free value.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

__all__ = [
    "Candidate",
    "DetectionResult",
    "ErrorKind",
    "KeywordProvider",
    "LineContext",
    "ScoredCandidate",
]


class ErrorKind(Enum):
    """Outcome classes that carry a canned, locale-specific reason string."""

    EMPTY_MESSAGE = "empty_message"
    NO_OTP_KEYWORD = "no_otp_keyword"
    KEYWORD_BUT_NO_CODE = "keyword_but_no_code"
    PARCEL_KEYWORD_BUT_NO_CODE = "parcel_keyword_but_no_code"


@dataclass(slots=True, frozen=True)
class Candidate:
    """A possible code found in the normalized message.

    ``source`` names the extraction pass that produced the candidate and
    ``score`` stays ``0.0`` until the scorer returns a scored copy.
    """

    code: str
    start_index: int
    end_index: int
    is_numeric: bool
    score: float = 0.0
    source: str = ""

    @property
    def length(self) -> int:
        """Return the length of the code (not of the matched text)."""

        return len(self.code)


@dataclass(slots=True, frozen=True)
class LineContext:
    """Substring treated as the local line around a candidate."""

    line: str
    start: int
    end: int


@dataclass(slots=True, frozen=True)
class DetectionResult:
    """Outcome of a single detection call.

    ``code`` is populated exactly when the message was classified as an OTP or a
    parcel notice.  ``confidence`` must be between ``0`` and ``1``.
    """

    is_otp: bool
    code: str | None
    confidence: float
    reason: str
    is_parcel: bool = False

    def __post_init__(self) -> None:  # noqa: D401 - simple validation
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError("confidence must be within [0.0, 1.0]")
        if (self.code is not None) != (self.is_otp or self.is_parcel):
            raise ValueError("code must be set iff is_otp or is_parcel")

    def to_dict(self) -> dict[str, object]:
        return {
            "is_otp": self.is_otp,
            "code": self.code,
            "confidence": self.confidence,
            "reason": self.reason,
            "is_parcel": self.is_parcel,
        }


@runtime_checkable
class KeywordProvider(Protocol):
    """Locale-aware supplier of keyword lists and canned reason strings.

    Lists are read once when a detector is constructed; implementations should
    return lowercase entries but the detector normalizes them regardless.
    """

    def get_otp_keywords(self) -> Sequence[str]:
        ...

    def get_safety_keywords(self) -> Sequence[str]:
        ...

    def get_money_indicators(self) -> Sequence[str]:
        ...

    def get_parcel_keywords(self) -> Sequence[str]:
        ...

    def get_error_message(self, kind: ErrorKind) -> str:
        """Return the reason string for ``kind``."""

        ...


@dataclass(slots=True, frozen=True)
class ScoredCandidate:
    """A scored candidate together with its per-signal contributions."""

    candidate: Candidate
    signals: dict[str, float] = field(default_factory=dict)
