"""Offline detection of one-time passcodes and parcel pickup codes in SMS text.

>>> from otpscan import detect
>>> result = detect("Your OTP is 123456")
>>> result.is_otp, result.code
(True, '123456')
"""

from .detect.base import DetectionResult, ErrorKind, KeywordProvider
from .detect.otp import OtpDetector, detect, get_detector

__all__ = [
    "DetectionResult",
    "ErrorKind",
    "KeywordProvider",
    "OtpDetector",
    "__version__",
    "detect",
    "get_detector",
]

__version__ = "0.1.0"
