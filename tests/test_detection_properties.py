"""Invariants that hold for every message the detector sees."""

from __future__ import annotations

import re

import pytest

from otpscan.config import load_config
from otpscan.detect.base import DetectionResult
from otpscan.detect.otp import OtpDetector
from otpscan.keywords.provider import StaticKeywordProvider
from otpscan.preprocess.normalizer import normalize

MESSAGES = [
    "Your OTP is 123456",
    "Your OTP is 123 456",
    "Please call +1 234 567 8900 for support",
    "Amount debited: Rs 123456 from your account",
    "Your parcel has arrived. Collect it with 4821 at the front desk.",
    "111111 222222",
    "您的验证码是 654321",
    "Your verification code is A1B2C3",
    "Visit https://example.com/verify/123456 now",
    "See you at lunch",
    "  \u200b  ",
]

_SEPARATORS = re.compile(r"[ -]")


def _check_invariants(result: DetectionResult, normalized: str) -> None:
    assert 0.0 <= result.confidence <= 1.0
    if result.code is not None:
        assert result.is_otp or result.is_parcel
        assert result.code in _SEPARATORS.sub("", normalized)
    if result.is_otp or result.is_parcel:
        assert result.code


@pytest.mark.parametrize("message", MESSAGES)
def test_result_invariants(detector: OtpDetector, message: str) -> None:
    explanation = detector.explain(message)
    _check_invariants(explanation.result, explanation.normalized.text)


@pytest.mark.parametrize("message", MESSAGES)
def test_detection_is_deterministic(detector: OtpDetector, message: str) -> None:
    assert detector.detect(message) == detector.detect(message)


@pytest.mark.parametrize("message", MESSAGES)
def test_normalized_input_gives_same_result(detector: OtpDetector, message: str) -> None:
    assert detector.detect(normalize(message).text) == detector.detect(message)


@pytest.mark.parametrize("message", ["", " ", "\n\n", "\t \r\n", "\u200b\u200c\ufeff"])
def test_blank_input_is_empty(detector: OtpDetector, message: str) -> None:
    result = detector.detect(message)
    assert result == DetectionResult(False, None, 0.0, "Empty message", False)


def test_non_ascii_digits_are_folded(detector: OtpDetector) -> None:
    assert detector.detect("Your OTP is ١٢٣٤٥٦").code == "123456"
    assert detector.detect("Your OTP is １２３４５６").code == "123456"


def test_zero_width_inside_code(detector: OtpDetector) -> None:
    assert detector.detect("Your OTP is 123\u200b456").code == "123456"


def test_url_digits_are_not_candidates(detector: OtpDetector) -> None:
    explanation = detector.explain("Visit https://example.com/verify/123456 now")
    assert explanation.candidates == ()
    assert explanation.result.code is None


def test_quoted_code_is_found(detector: OtpDetector) -> None:
    result = detector.detect('Your OTP is "654321"')
    assert result.is_otp is True
    assert result.code == "654321"


def test_long_input_is_truncated(provider: StaticKeywordProvider) -> None:
    cfg = load_config()
    cfg.limits.max_message_length = 40
    detector = OtpDetector(provider, cfg)
    message = "x" * 50 + " Your OTP is 123456"
    explanation = detector.explain(message)
    assert len(explanation.normalized.text) == 40
    assert explanation.result.code is None


def test_huge_digit_run_is_not_a_candidate(detector: OtpDetector) -> None:
    result = detector.detect("Your OTP is " + "9" * 5000)
    assert result.is_otp is False
    assert result.code is None
