from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from otpscan.detect.otp import OtpDetector
from otpscan.keywords.provider import StaticKeywordProvider
from otpscan.utils.logging import ROOT_LOGGER_NAME

ENGLISH_OTP_KEYWORDS = (
    "otp", "one time password", "one-time password", "verification code",
    "verification number", "login code", "login otp", "security code",
    "2-step code", "2 factor code", "2fa code", "mfa code", "auth code",
    "passcode", "access code", "reset code", "transaction code",
    "confirm code", "confirmation code", "code",
)  # fmt: skip

ENGLISH_SAFETY_KEYWORDS = (
    "do not share", "don't share", "never share", "do not disclose",
    "do not forward", "keep this code secret", "valid for",
    "expires in", "expires within", "expires after",
)  # fmt: skip

ENGLISH_MONEY_INDICATORS = (
    "rs", "inr", "usd", "eur", "gbp", "₹", "$", "€", "£", "balance",
    "amount", "debited", "credited", "txn", "transaction id", "order id",
)  # fmt: skip

ENGLISH_PARCEL_KEYWORDS = ("pickup code", "collection code", "parcel", "locker")


@pytest.fixture
def provider() -> StaticKeywordProvider:
    return StaticKeywordProvider(
        otp_keywords=ENGLISH_OTP_KEYWORDS,
        safety_keywords=ENGLISH_SAFETY_KEYWORDS,
        money_indicators=ENGLISH_MONEY_INDICATORS,
        parcel_keywords=ENGLISH_PARCEL_KEYWORDS,
    )


@pytest.fixture
def detector(provider: StaticKeywordProvider) -> OtpDetector:
    return OtpDetector(provider)


@pytest.fixture(autouse=True)
def _reset_cli_logging() -> Iterator[None]:
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
