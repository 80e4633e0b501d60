"""Typer-based command line interface for the OTP detector.

Commands
--------
``detect``    classify one message given as an argument or read from a file
``batch``     classify every line of a file, writing JSON Lines
``keywords``  print the resolved keyword lists for a locale

Exit codes
----------
0 success
2 usage error
3 I/O error (missing or unreadable input, unwritable output)
4 configuration error (invalid config file or keyword bundle)
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from .config import ConfigModel, load_config
from .detect.otp import OtpDetector
from .keywords.provider import BundleKeywordProvider
from .utils.errors import ConfigError
from .utils.logging import configure_logging

if not sys.stdout.isatty():  # pragma: no cover - CLI test context
    os.environ.setdefault("NO_COLOR", "1")

app = typer.Typer(
    name="otpscan",
    help="Find OTP and parcel codes in SMS text. Try 'otpscan detect'.",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_exit(code: int, msg: str | None = None) -> None:
    """Exit the CLI with ``code`` emitting ``msg`` to stderr if provided."""

    if msg:
        typer.echo(msg, err=True)
    raise typer.Exit(code)


def _dumps(payload: object) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True)


def _load(config_path: Path | None, locale: str | None) -> ConfigModel:
    try:
        cfg = load_config(config_path)
    except OSError as exc:
        _safe_exit(3, str(exc))
    except (ValidationError, Exception) as exc:  # pragma: no cover - diverse
        _safe_exit(4, str(exc).splitlines()[0])
    if locale:
        cfg = cfg.model_copy(update={"locale": locale})
    return cfg


def _build_detector(cfg: ConfigModel) -> OtpDetector:
    try:
        return OtpDetector(config=cfg)
    except ConfigError as exc:
        _safe_exit(4, str(exc))
    raise AssertionError("unreachable")  # pragma: no cover


def _read_text(path: Path, encoding: str) -> str:
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        _safe_exit(3, f"{path}: {exc}")
    raise AssertionError("unreachable")  # pragma: no cover


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.callback()
def main() -> None:
    """Entry point for the otpscan command group."""
    pass


@app.command()
def detect(
    message: Optional[str] = typer.Argument(None, help="Message text to classify"),  # noqa: B008
    in_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--in", "--input", help="Read the message from a file instead"
    ),
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML config to override defaults"
    ),
    locale: Optional[str] = typer.Option(None, "--locale", help="Keyword bundle locale"),  # noqa: B008
    explain: bool = typer.Option(  # noqa: B008
        False, "--explain", help="Include every scored candidate in the output"
    ),
    encoding: str = typer.Option("utf-8-sig", help="Input file encoding"),  # noqa: B008
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Emit debug logging to stderr"
    ),
) -> None:
    """Classify a single message and print the result as JSON."""

    configure_logging(verbose)
    if message is None and in_path is None:
        _safe_exit(2, "Provide a MESSAGE argument or --in FILE")
    if message is not None and in_path is not None:
        _safe_exit(2, "MESSAGE and --in are mutually exclusive")

    text = message if message is not None else _read_text(in_path, encoding)  # type: ignore[arg-type]
    detector = _build_detector(_load(config_path, locale))
    if explain:
        typer.echo(_dumps(detector.explain(text).to_dict()))
    else:
        typer.echo(_dumps(detector.detect(text).to_dict()))


@app.command()
def batch(
    in_path: Path = typer.Option(..., "--in", "--input", help="One message per line"),  # noqa: B008
    out_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--out", help="Write JSON Lines here instead of stdout"
    ),
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML config to override defaults"
    ),
    locale: Optional[str] = typer.Option(None, "--locale", help="Keyword bundle locale"),  # noqa: B008
    encoding: str = typer.Option("utf-8-sig", help="Input file encoding"),  # noqa: B008
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Emit progress messages to stderr"
    ),
) -> None:
    """Classify every line of ``--in`` and emit one JSON object per line."""

    configure_logging(verbose)
    text = _read_text(in_path, encoding)
    detector = _build_detector(_load(config_path, locale))

    lines = []
    hits = 0
    for message in text.splitlines():
        result = detector.detect(message)
        hits += result.is_otp or result.is_parcel
        lines.append(_dumps(result.to_dict()))
    output = "\n".join(lines) + ("\n" if lines else "")

    if out_path is None:
        typer.echo(output, nl=False)
    else:
        try:
            out_path.write_text(output, encoding="utf-8")
        except OSError as exc:
            _safe_exit(3, str(exc))
    if verbose:
        typer.echo(f"Processed {len(lines)} messages, {hits} with codes", err=True)


@app.command()
def keywords(
    locale: Optional[str] = typer.Option(None, "--locale", help="Keyword bundle locale"),  # noqa: B008
) -> None:
    """Print the keyword lists resolved for ``--locale``."""

    try:
        provider = BundleKeywordProvider(locale or load_config().locale)
    except ConfigError as exc:
        _safe_exit(4, str(exc))
    typer.echo(
        _dumps(
            {
                "locale": provider.locale,
                "otp_keywords": list(provider.get_otp_keywords()),
                "safety_keywords": list(provider.get_safety_keywords()),
                "money_indicators": list(provider.get_money_indicators()),
                "parcel_keywords": list(provider.get_parcel_keywords()),
            }
        )
    )


if __name__ == "__main__":  # pragma: no cover
    app()
