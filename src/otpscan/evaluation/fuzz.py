"""Seeded generation of adversarial message variants.

Purpose:
    Stress the detector with deterministic but hostile inputs: mixed scripts,
    zero-width characters, long digit runs, repeated separators and random
    code points.

Public contracts:
    - ``variants(seed, count, options)``: yield ``count`` message strings.
    - ``embed_code(seed, code)``: wrap ``code`` in a random OTP template.

The generator uses :class:`random.Random` instances only, never the module
level state, so output depends on ``seed`` alone.
"""

from __future__ import annotations

import random
from collections.abc import Iterator
from dataclasses import dataclass

__all__ = ["FuzzOptions", "TEMPLATES", "embed_code", "variants"]

TEMPLATES: tuple[str, ...] = (
    "Your OTP is {code}",
    "{code} is your verification code. Do not share it.",
    "Use code {code} to sign in. Valid for 10 minutes.",
    "Login code: {code}",
    "您的验证码是{code}，请勿泄露。",
    "【快递】您的取件码为{code}",
    "인증번호 [{code}]를 입력해 주세요",
)

_FRAGMENTS: tuple[str, ...] = (
    "Rs 5,000 debited",
    "call +1 800 555 0199",
    "https://example.com/a/1234567",
    "order id 99887766",
    "\u200b",
    "\n\n",
    "\t",
    " - ",
    "++++",
    "İ",
    "١٢٣٤",
    "ＡＢＣ１２３",
    "\ufeff",
    ":=:=",
)


@dataclass(slots=True, frozen=True)
class FuzzOptions:
    """Knobs for :func:`variants`."""

    max_fragments: int = 12
    max_digit_run: int = 64
    random_codepoints: int = 16
    repeat_char_max: int = 256


def embed_code(seed: int, code: str) -> str:
    """Return ``code`` placed in a template chosen by ``seed``."""

    rng = random.Random(seed)
    return rng.choice(TEMPLATES).format(code=code)


def _random_codepoints(rng: random.Random, n: int) -> str:
    out: list[str] = []
    for _ in range(n):
        cp = rng.randint(0x20, 0x2FFFF)
        if 0xD800 <= cp <= 0xDFFF:  # surrogates
            cp = 0x20
        out.append(chr(cp))
    return "".join(out)


def variants(seed: int, count: int, options: FuzzOptions | None = None) -> Iterator[str]:
    """Yield ``count`` adversarial messages derived from ``seed``."""

    opts = options or FuzzOptions()
    rng = random.Random(seed)
    for _ in range(count):
        parts: list[str] = []
        for _ in range(rng.randint(1, opts.max_fragments)):
            roll = rng.random()
            if roll < 0.3:
                parts.append(rng.choice(_FRAGMENTS))
            elif roll < 0.5:
                digits = rng.randint(1, opts.max_digit_run)
                parts.append("".join(rng.choice("0123456789") for _ in range(digits)))
            elif roll < 0.65:
                parts.append(rng.choice("-+ 0a:\n") * rng.randint(1, opts.repeat_char_max))
            elif roll < 0.85:
                parts.append(_random_codepoints(rng, rng.randint(1, opts.random_codepoints)))
            else:
                code = str(rng.randint(100, 99999999))
                parts.append(rng.choice(TEMPLATES).format(code=code))
        yield rng.choice(("", " ", "\n")).join(parts)
