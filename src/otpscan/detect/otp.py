"""OTP and parcel code detection for a single message.

:class:`OtpDetector` sequences the pipeline stages:

normalize -> message flags -> extract candidates -> score -> pick winner ->
calibrate -> build result

The detector reads its keyword lists once at construction and keeps no other
state, so one instance may be shared freely between threads.  ``detect`` never
raises for string input; empty messages and messages without candidates map to
low-confidence results whose ``reason`` comes from the keyword provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from ..config import ConfigModel, load_config
from ..preprocess.normalizer import NormalizedMessage, normalize
from ..utils.logging import get_logger
from .base import DetectionResult, ErrorKind, KeywordProvider, ScoredCandidate
from .calibrate import MessageFlags, calibrate, compute_flags
from .extract import extract_candidates
from .scoring import LineIndex, keyword_centers, pick_winner, score_candidate

__all__ = ["Explanation", "OtpDetector", "detect", "get_detector"]

log = get_logger(__name__)

NO_CANDIDATE_CONFIDENCE = 0.1


@dataclass(slots=True, frozen=True)
class Explanation:
    """Detection result plus the intermediate data that produced it."""

    result: DetectionResult
    normalized: NormalizedMessage
    flags: MessageFlags | None
    candidates: tuple[ScoredCandidate, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            **self.result.to_dict(),
            "normalized": self.normalized.text,
            "flags": (
                {
                    "has_otp_keyword": self.flags.has_otp_keyword,
                    "has_safety_keyword": self.flags.has_safety_keyword,
                    "has_cjk_otp_indicator": self.flags.has_cjk_otp_indicator,
                    "is_parcel": self.flags.is_parcel,
                }
                if self.flags is not None
                else None
            ),
            "candidates": [
                {
                    "code": item.candidate.code,
                    "start": item.candidate.start_index,
                    "end": item.candidate.end_index,
                    "source": item.candidate.source,
                    "score": item.candidate.score,
                    "signals": dict(item.signals),
                }
                for item in self.candidates
            ],
        }


def _format_reason(winner: ScoredCandidate, flags: MessageFlags, confidence: float) -> str:
    best = winner.candidate
    return (
        f"Best candidate: '{best.code}' (len={best.length}), score={best.score:.2f}. "
        f"HasOtpKeyword={flags.has_otp_keyword}, "
        f"HasSafetyKeyword={flags.has_safety_keyword}, "
        f"HasCjkOtpIndicator={flags.has_cjk_otp_indicator}, "
        f"IsParcel={flags.is_parcel}, "
        f"GlobalConfidence={confidence:.2f}."
    )


class OtpDetector:
    """Detect one-time passcodes and parcel pickup codes in message text."""

    def __init__(
        self,
        provider: KeywordProvider | None = None,
        config: ConfigModel | None = None,
    ) -> None:
        from ..keywords.provider import BundleKeywordProvider, KeywordSet  # local import to avoid cycle

        self.config = config if config is not None else load_config()
        if provider is None:
            provider = BundleKeywordProvider(self.config.locale)
        self.provider = provider
        self.otp_keywords = KeywordSet.of(provider.get_otp_keywords())
        self.safety_keywords = KeywordSet.of(provider.get_safety_keywords())
        self.money_indicators = KeywordSet.of(provider.get_money_indicators())
        self.parcel_keywords = KeywordSet.of(provider.get_parcel_keywords())
        self._messages = {kind: provider.get_error_message(kind) for kind in ErrorKind}

    # ------------------------------------------------------------------
    def detect(self, message: str) -> DetectionResult:
        """Detect an OTP or parcel code in ``message``."""

        return self.explain(message).result

    def explain(self, message: str) -> Explanation:
        """Run detection and return the result with every scored candidate."""

        norm = normalize(message, self.config.limits.max_message_length)
        if norm.is_empty:
            result = DetectionResult(
                False, None, 0.0, self._messages[ErrorKind.EMPTY_MESSAGE], False
            )
            return Explanation(result, norm, None, ())

        flags = compute_flags(
            norm.lower,
            otp_keywords=self.otp_keywords,
            safety_keywords=self.safety_keywords,
            parcel_keywords=self.parcel_keywords,
        )

        candidates = extract_candidates(norm.text)
        if not candidates:
            if flags.has_otp_keyword or flags.has_cjk_otp_indicator:
                kind = ErrorKind.KEYWORD_BUT_NO_CODE
            elif flags.is_parcel:
                kind = ErrorKind.PARCEL_KEYWORD_BUT_NO_CODE
            else:
                kind = ErrorKind.NO_OTP_KEYWORD
            log.debug("No candidates (%s)", kind.value)
            result = DetectionResult(
                False, None, NO_CANDIDATE_CONFIDENCE, self._messages[kind], False
            )
            return Explanation(result, norm, flags, ())

        scoring = self.config.scoring
        centers = keyword_centers(norm.lower, self.otp_keywords)
        lines = LineIndex(norm.text)
        scored = tuple(
            score_candidate(
                candidate,
                norm.text,
                norm.lower,
                centers,
                self.money_indicators,
                has_safety_keyword=flags.has_safety_keyword,
                money_radius=scoring.money_radius,
                phone_prefix_window=scoring.phone_prefix_window,
                lines=lines,
            )
            for candidate in candidates
        )
        winner = pick_winner(scored)

        cal = self.config.calibration
        calibration = calibrate(
            winner.candidate.score,
            flags,
            score_scale=cal.score_scale,
            otp_threshold=cal.otp_threshold,
            keyword_boost=cal.keyword_boost,
            safety_boost=cal.safety_boost,
            parcel_boost=cal.parcel_boost,
        )
        keep_code = calibration.is_otp or flags.is_parcel
        log.debug(
            "Winner %r score=%.2f confidence=%.2f of %d candidates",
            winner.candidate.code,
            winner.candidate.score,
            calibration.confidence,
            len(scored),
        )
        result = DetectionResult(
            is_otp=calibration.is_otp,
            code=winner.candidate.code if keep_code else None,
            confidence=calibration.confidence,
            reason=_format_reason(winner, flags, calibration.confidence),
            is_parcel=flags.is_parcel,
        )
        return Explanation(result, norm, flags, scored)


@lru_cache(maxsize=1)
def get_detector() -> OtpDetector:
    """Return a shared :class:`OtpDetector` built from the default config."""

    return OtpDetector()


def detect(message: str) -> DetectionResult:
    """Detect an OTP or parcel code in ``message`` with the default detector."""

    return get_detector().detect(message)
