"""OTP and parcel code detection: extraction, scoring and calibration."""

from .base import Candidate, DetectionResult, ErrorKind, KeywordProvider, LineContext
from .calibrate import MessageFlags, calibrate, compute_flags
from .extract import extract_candidates
from .otp import Explanation, OtpDetector, detect, get_detector
from .scoring import pick_winner, score_candidate

__all__ = [
    "Candidate",
    "DetectionResult",
    "ErrorKind",
    "Explanation",
    "KeywordProvider",
    "LineContext",
    "MessageFlags",
    "OtpDetector",
    "calibrate",
    "compute_flags",
    "detect",
    "extract_candidates",
    "get_detector",
    "pick_winner",
    "score_candidate",
]
