"""Fixed character tables and marker strings shared by the detection modules."""

from __future__ import annotations

__all__ = [
    "CJK_OTP_INDICATORS",
    "CJK_PARCEL_MARKERS",
    "DIGIT_FOLD_TABLE",
    "ZERO_WIDTHS",
]

# Zero-width characters which are dropped before whitespace collapsing.
ZERO_WIDTHS: frozenset[str] = frozenset(
    {
        "\u200b",  # ZERO WIDTH SPACE
        "\u200c",  # ZERO WIDTH NON-JOINER
        "\u200d",  # ZERO WIDTH JOINER
        "\ufeff",  # ZERO WIDTH NO-BREAK SPACE
    }
)

# Decimal digit blocks folded one-for-one onto ASCII ``0-9``.
_DIGIT_BLOCKS = (
    0x0660,  # Arabic-Indic
    0x06F0,  # Extended Arabic-Indic (Persian)
    0x07C0,  # N'Ko
    0xFF10,  # Fullwidth
)

DIGIT_FOLD_TABLE: dict[int, str] = {
    base + offset: str(offset) for base in _DIGIT_BLOCKS for offset in range(10)
}

# Script-specific OTP markers checked independently of the keyword provider.
CJK_OTP_INDICATORS: tuple[str, ...] = (
    "验证码",
    "驗證碼",
    "校验码",
    "校驗碼",
    "确认码",
    "確認碼",
    "动态码",
    "動態碼",
    "动态密码",
    "動態密碼",
    "认证码",
    "認證碼",
    "認証コード",
    "確認コード",
    "ワンタイムパスワード",
    "인증번호",
    "인증 번호",
    "인증코드",
    "인증 코드",
)

# Parcel pickup markers; a message matching one is a parcel notice.
CJK_PARCEL_MARKERS: tuple[str, ...] = (
    "取件码",
    "取件碼",
    "取货码",
    "取貨碼",
    "提货码",
    "提貨碼",
    "取件",
    "快递",
    "快遞",
    "驿站",
    "驛站",
    "包裹",
    "丰巢",
    "菜鸟",
    "柜机",
    "受取",
    "택배",
)
