"""Tests for candidate scoring signals and winner selection."""

from __future__ import annotations

import re

import pytest

from otpscan.detect.base import Candidate, ScoredCandidate
from otpscan.detect.scoring import (
    LineIndex,
    extract_line_context,
    has_indicator_near,
    keyword_centers,
    length_score,
    looks_like_phone_number,
    min_keyword_distance,
    pick_winner,
    score_breakdown,
    score_candidate,
)

MONEY = ("rs", "balance", "amount", "debited")


def _cand(text: str, code: str, numeric: bool = True) -> Candidate:
    start = text.index(code)
    return Candidate(code, start, start + len(code) - 1, numeric)


@pytest.mark.parametrize(
    "length,expected",
    [(6, 3.0), (4, 2.0), (5, 2.0), (8, 2.0), (3, 1.0), (9, 1.0), (10, 1.0), (2, -1.0), (11, -1.0)],
)
def test_length_score(length: int, expected: float) -> None:
    assert length_score(length) == expected


def test_full_breakdown_for_clear_otp() -> None:
    text = "Your OTP is 123456"
    cand = _cand(text, "123456")
    signals = score_breakdown(
        cand, text, text.lower(), keyword_centers(text.lower(), ["otp"]), MONEY,
        has_safety_keyword=False,
    )  # fmt: skip
    assert signals == {
        "length": 3.0,
        "numeric": 0.5,
        "long_numeric": 0.0,
        "exact_line": 0.0,
        "line_keyword": 2.0,
        "assignment": 1.5,
        "keyword_proximity": 2.0,
        "safety": 0.0,
        "money": 0.0,
        "phone_shape": 0.0,
    }


def test_score_candidate_returns_copy() -> None:
    text = "Your OTP is 123456"
    cand = _cand(text, "123456")
    scored = score_candidate(
        cand, text, text.lower(), keyword_centers(text.lower(), ["otp"]), MONEY,
        has_safety_keyword=True,
    )  # fmt: skip
    assert cand.score == 0.0
    assert scored.candidate.score == pytest.approx(10.0)
    assert scored.signals["safety"] == 1.0


def test_exact_line_match() -> None:
    text = "123456"
    signals = score_breakdown(
        _cand(text, "123456"), text, text, [], MONEY, has_safety_keyword=False
    )
    assert signals["exact_line"] == 2.5


def test_assignment_is_case_sensitive() -> None:
    text = "YOUR OTP IS 123456"
    signals = score_breakdown(
        _cand(text, "123456"), text, text.lower(), [], MONEY, has_safety_keyword=False
    )
    assert signals["assignment"] == 0.0
    assert signals["line_keyword"] == 2.0


def test_line_context_is_whole_normalized_message() -> None:
    text = "Your verification code: 123456 Do not share"
    start = text.index("123456")
    ctx = extract_line_context(text, start, start + 5)
    assert ctx.line == text
    assert (ctx.start, ctx.end) == (0, len(text) - 1)


def test_line_context_stops_at_newline() -> None:
    text = "header\ncode 1234\nfooter"
    start = text.index("1234")
    ctx = extract_line_context(text, start, start + 3)
    assert ctx.line == "code 1234"


def test_keyword_distance_tiers() -> None:
    centers = keyword_centers("otp " + "x" * 100, ["otp"])
    assert centers == [1]
    assert min_keyword_distance(Candidate("1234", 10, 13, True), centers) == 10
    assert min_keyword_distance(Candidate("1234", 30, 33, True), []) is None

    def proximity(start: int) -> float:
        text = "otp " + "x" * 200
        cand = Candidate("1234", start, start + 3, True)
        return score_breakdown(
            cand, text, text, keyword_centers(text, ["otp"]), (), has_safety_keyword=False
        )["keyword_proximity"]

    assert proximity(18) == 2.0
    assert proximity(38) == 1.0
    assert proximity(78) == 0.5
    assert proximity(120) == 0.0


def test_keyword_centers_non_overlapping_and_sorted() -> None:
    lower = "code ... verification code ... code"
    centers = keyword_centers(lower, ["code", "verification code", ""])
    assert centers == sorted(centers)
    assert len(centers) == 4


def test_money_window() -> None:
    lower = "amount debited: rs 123456 from your account"
    assert has_indicator_near(lower, MONEY, lower.index("123456"), 25)
    far = "x" * 40 + " 123456"
    assert not has_indicator_near("rs" + far, MONEY, len(far) - 4, 25)
    assert not has_indicator_near("", MONEY, 0, 25)


@pytest.mark.parametrize(
    "text,code,expected",
    [
        ("Please call +1 234 567 8900", "234", True),
        ("tel: 55667788", "55667788", True),
        ("Call 5566", "5566", True),
        ("Your id 123456789", "123456789", True),
        ("Your OTP is 123456", "123456", False),
    ],
)
def test_phone_shape(text: str, code: str, expected: bool) -> None:
    assert looks_like_phone_number(_cand(text, code), text) is expected


def test_long_numeric_penalties_stack() -> None:
    text = "Ref 123456789"
    signals = score_breakdown(
        _cand(text, "123456789"), text, text.lower(), [], MONEY, has_safety_keyword=False
    )
    assert signals["long_numeric"] == -1.5
    assert signals["phone_shape"] == -2.5


def test_pick_winner_prefers_first_on_tie() -> None:
    first = ScoredCandidate(Candidate("111111", 0, 5, True, score=3.5, source="numeric"))
    second = ScoredCandidate(Candidate("222222", 7, 12, True, score=3.5, source="numeric"))
    assert pick_winner([first, second]) is first
    assert pick_winner([second, first]) is second
    better = ScoredCandidate(Candidate("A1B2", 14, 17, False, score=4.0, source="alnum"))
    assert pick_winner([first, second, better]) is better


def test_pick_winner_empty() -> None:
    with pytest.raises(ValueError):
        pick_winner([])


@pytest.mark.parametrize(
    "text",
    [
        "Your OTP is 123456",
        "YOUR OTP IS 123456",
        "Your OTP is: <123456>",
        "this123456 and OTP=  654321",
        "code:\t\t A1B2 then 12 34",
        "is 123 is 1234 is 12345",
        "header\nOTP is 1234\nfooter 5678",
        "Ref 1234567890123",
    ],
)
def test_line_index_matches_direct_search(text: str) -> None:
    lines = LineIndex(text)
    codes = [m.group() for m in re.finditer(r"[0-9A-Za-z]{3,}", text)]
    codes += ["123456789012", "1234"]
    for m in re.finditer(r"[0-9A-Za-z]{3,}", text):
        cand = Candidate(m.group(), m.start(), m.end() - 1, m.group().isdigit())
        expected = extract_line_context(text, cand.start_index, cand.end_index)
        line = lines.signals_for(cand)
        assert line.context == expected
        assert line.stripped == expected.line.strip()
        assert line.has_keyword is bool(
            re.search(r"(otp|code|password|passcode)", expected.line, re.IGNORECASE)
        )
        for code in codes:
            direct = re.search(r"(:|is|=)\s*" + re.escape(code), expected.line)
            assert line.is_assigned(code) is (direct is not None), code


def test_line_signals_are_shared_per_line() -> None:
    text = "otp 1234 5678\nnext 9999"
    lines = LineIndex(text)
    first = lines.signals_for(_cand(text, "1234"))
    assert lines.signals_for(_cand(text, "5678")) is first
    assert lines.signals_for(_cand(text, "9999")) is not first


def test_breakdown_with_shared_index_matches_standalone() -> None:
    text = "Your OTP is 123 456. Code: 987654"
    lower = text.lower()
    centers = keyword_centers(lower, ["otp", "code"])
    lines = LineIndex(text)
    for code in ("123", "456", "987654"):
        cand = _cand(text, code)
        shared = score_breakdown(
            cand, text, lower, centers, MONEY, has_safety_keyword=False, lines=lines
        )
        alone = score_breakdown(cand, text, lower, centers, MONEY, has_safety_keyword=False)
        assert shared == alone
