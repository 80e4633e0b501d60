"""Keyword provider implementations.

Two providers satisfy :class:`~otpscan.detect.base.KeywordProvider`:

* :class:`BundleKeywordProvider` loads a packaged YAML bundle for a locale.
  Bundles are deep-merged over the English bundle so a locale only needs the
  fields it translates.  Locale lookup is progressively less specific
  (``zh_Hans_CN`` -> ``zh_hans_cn`` -> ``zh_hans`` -> ``zh``); an unknown locale
  logs a warning and falls back to English.
* :class:`StaticKeywordProvider` holds lists supplied by the caller, for tests
  and hosts that manage their own resources.

Keyword lists are lowercased on load.  A bundle that exists but does not parse
or validate raises :class:`~otpscan.utils.errors.KeywordBundleError`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from importlib import resources as importlib_resources
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from ..config.schema import deep_merge_dicts
from ..detect.base import ErrorKind
from ..utils.errors import KeywordBundleError
from ..utils.logging import get_logger

__all__ = [
    "DEFAULT_ERROR_MESSAGES",
    "DEFAULT_LOCALE",
    "BundleKeywordProvider",
    "KeywordBundle",
    "KeywordSet",
    "StaticKeywordProvider",
    "available_locales",
    "locale_candidates",
]

log = get_logger(__name__)

DEFAULT_LOCALE = "en"

DEFAULT_ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.EMPTY_MESSAGE: "Empty message",
    ErrorKind.NO_OTP_KEYWORD: "No OTP-like keywords and no candidate code found",
    ErrorKind.KEYWORD_BUT_NO_CODE: (
        "Contains OTP-like keywords but no numeric/alphanumeric candidate code found"
    ),
    ErrorKind.PARCEL_KEYWORD_BUT_NO_CODE: (
        "Contains parcel pickup keywords but no candidate code found"
    ),
}

_BUNDLE_PACKAGE = "otpscan.keywords.bundles"
_LOCALE_SPLIT_RX = re.compile(r"[-_.@]")


# ---------------------------------------------------------------------------
# Keyword sets
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class KeywordSet:
    """Ordered, de-duplicated, lowercased keywords."""

    items: tuple[str, ...] = ()

    @classmethod
    def of(cls, keywords: Iterable[str]) -> "KeywordSet":
        seen: dict[str, None] = {}
        for keyword in keywords:
            normalized = str(keyword).strip().lower()
            if normalized:
                seen.setdefault(normalized, None)
        return cls(tuple(seen))

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, keyword: object) -> bool:
        return keyword in self.items


# ---------------------------------------------------------------------------
# Bundle schema
# ---------------------------------------------------------------------------


class ErrorMessages(BaseModel):
    """Canned reason strings for a locale."""

    empty_message: str
    no_otp_keyword: str
    keyword_but_no_code: str
    parcel_keyword_but_no_code: str

    model_config = ConfigDict(extra="forbid")


class KeywordBundle(BaseModel):
    """Validated contents of a ``bundles/<locale>.yml`` file."""

    otp_keywords: list[str]
    safety_keywords: list[str]
    money_indicators: list[str]
    parcel_keywords: list[str]
    errors: ErrorMessages

    model_config = ConfigDict(extra="forbid")


def locale_candidates(locale: str | None) -> list[str]:
    """Return bundle names to try for ``locale``, most specific first."""

    if not locale:
        return [DEFAULT_LOCALE]
    parts = [p for p in _LOCALE_SPLIT_RX.split(locale.strip().lower()) if p]
    return ["_".join(parts[:n]) for n in range(len(parts), 0, -1)]


def available_locales() -> list[str]:
    """Return the names of all packaged bundles."""

    root = importlib_resources.files(_BUNDLE_PACKAGE)
    return sorted(
        entry.name[: -len(".yml")] for entry in root.iterdir() if entry.name.endswith(".yml")
    )


def _read_bundle(name: str) -> dict[str, Any] | None:
    resource = importlib_resources.files(_BUNDLE_PACKAGE).joinpath(f"{name}.yml")
    if not resource.is_file():
        return None
    try:
        with resource.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise KeywordBundleError(f"keyword bundle {name!r} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise KeywordBundleError(f"keyword bundle {name!r} must be a mapping")
    return data


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class BundleKeywordProvider:
    """Keyword provider backed by the packaged YAML bundles."""

    def __init__(self, locale: str | None = DEFAULT_LOCALE) -> None:
        base = _read_bundle(DEFAULT_LOCALE)
        if base is None:  # pragma: no cover - broken installation
            raise KeywordBundleError(f"default keyword bundle {DEFAULT_LOCALE!r} is missing")

        resolved = DEFAULT_LOCALE
        merged = base
        for name in locale_candidates(locale):
            if name == DEFAULT_LOCALE:
                break
            data = _read_bundle(name)
            if data is not None:
                merged = deep_merge_dicts(base, data)
                resolved = name
                break
        else:
            log.warning("No keyword bundle for locale %r, using %r", locale, DEFAULT_LOCALE)

        try:
            bundle = KeywordBundle.model_validate(merged)
        except ValidationError as exc:
            raise KeywordBundleError(
                f"keyword bundle {resolved!r} is invalid: {str(exc).splitlines()[0]}"
            ) from exc

        self.locale = resolved
        self._otp = KeywordSet.of(bundle.otp_keywords)
        self._safety = KeywordSet.of(bundle.safety_keywords)
        self._money = KeywordSet.of(bundle.money_indicators)
        self._parcel = KeywordSet.of(bundle.parcel_keywords)
        self._errors: dict[ErrorKind, str] = {
            kind: getattr(bundle.errors, kind.value) for kind in ErrorKind
        }

    def __repr__(self) -> str:
        return f"BundleKeywordProvider(locale={self.locale!r})"

    def get_otp_keywords(self) -> Sequence[str]:
        return self._otp.items

    def get_safety_keywords(self) -> Sequence[str]:
        return self._safety.items

    def get_money_indicators(self) -> Sequence[str]:
        return self._money.items

    def get_parcel_keywords(self) -> Sequence[str]:
        return self._parcel.items

    def get_error_message(self, kind: ErrorKind) -> str:
        return self._errors.get(kind) or DEFAULT_ERROR_MESSAGES[kind]


@dataclass(slots=True, frozen=True)
class StaticKeywordProvider:
    """In-memory keyword provider built from caller supplied lists."""

    otp_keywords: tuple[str, ...] = ()
    safety_keywords: tuple[str, ...] = ()
    money_indicators: tuple[str, ...] = ()
    parcel_keywords: tuple[str, ...] = ()
    error_messages: Mapping[ErrorKind, str] = field(
        default_factory=lambda: dict(DEFAULT_ERROR_MESSAGES)
    )

    def get_otp_keywords(self) -> Sequence[str]:
        return KeywordSet.of(self.otp_keywords).items

    def get_safety_keywords(self) -> Sequence[str]:
        return KeywordSet.of(self.safety_keywords).items

    def get_money_indicators(self) -> Sequence[str]:
        return KeywordSet.of(self.money_indicators).items

    def get_parcel_keywords(self) -> Sequence[str]:
        return KeywordSet.of(self.parcel_keywords).items

    def get_error_message(self, kind: ErrorKind) -> str:
        return self.error_messages.get(kind) or DEFAULT_ERROR_MESSAGES[kind]
