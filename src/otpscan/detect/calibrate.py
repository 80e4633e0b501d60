"""Message-level flags and confidence calibration.

The winning candidate's raw score is mapped onto ``[0, 1]`` by dividing by a
fixed scale and clamping.  Message-level boolean signals then add fixed boosts:

.. code-block:: text

    raw        = clamp(score / score_scale, 0, 1)
    boost     += keyword_boost  if has_otp_keyword or has_cjk_otp_indicator
    boost     += safety_boost   if has_safety_keyword
    boost     += parcel_boost   if is_parcel
    confidence = clamp(raw + boost, 0, 1)
    is_otp     = confidence >= otp_threshold

``is_parcel`` is computed from keyword matches alone and does not exclude
``is_otp``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..utils.constants import CJK_OTP_INDICATORS, CJK_PARCEL_MARKERS

__all__ = ["Calibration", "MessageFlags", "calibrate", "compute_flags", "contains_any"]


@dataclass(slots=True, frozen=True)
class MessageFlags:
    """Boolean keyword signals computed once per message."""

    has_otp_keyword: bool
    has_safety_keyword: bool
    has_cjk_otp_indicator: bool
    has_parcel_keyword: bool

    @property
    def is_parcel(self) -> bool:
        return self.has_parcel_keyword


@dataclass(slots=True, frozen=True)
class Calibration:
    """Calibrated confidence together with the OTP decision."""

    confidence: float
    is_otp: bool


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def contains_any(text: str, needles: Iterable[str]) -> bool:
    """Return ``True`` if any non-empty needle is a substring of ``text``."""

    return any(needle and needle in text for needle in needles)


def compute_flags(
    lower: str,
    *,
    otp_keywords: Iterable[str],
    safety_keywords: Iterable[str],
    parcel_keywords: Iterable[str],
) -> MessageFlags:
    """Scan the lowercased message for every message-level signal."""

    return MessageFlags(
        has_otp_keyword=contains_any(lower, otp_keywords),
        has_safety_keyword=contains_any(lower, safety_keywords),
        has_cjk_otp_indicator=contains_any(lower, CJK_OTP_INDICATORS),
        has_parcel_keyword=contains_any(lower, parcel_keywords)
        or contains_any(lower, CJK_PARCEL_MARKERS),
    )


def calibrate(
    score: float,
    flags: MessageFlags,
    *,
    score_scale: float = 8.0,
    otp_threshold: float = 0.6,
    keyword_boost: float = 0.15,
    safety_boost: float = 0.15,
    parcel_boost: float = 0.15,
) -> Calibration:
    """Return the calibrated confidence for a winning ``score``."""

    confidence = _clamp(score / score_scale)
    boost = 0.0
    if flags.has_otp_keyword or flags.has_cjk_otp_indicator:
        boost += keyword_boost
    if flags.has_safety_keyword:
        boost += safety_boost
    if flags.is_parcel:
        boost += parcel_boost
    confidence = _clamp(confidence + boost)
    return Calibration(confidence, confidence >= otp_threshold)
