"""Resolved runtime configuration — CLI values merged with environment defaults."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from asciimoon.errors import CatalogLookupError, ConfigError
from asciimoon.i18n import index_for_code
from asciimoon.models import Theme
from asciimoon.renderers.disc import check_height

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_MINUTES = 5

ENV_THEME = "ASCII_MOON_THEME"
ENV_POEMS_DIR = "ASCII_MOON_POEMS_DIR"
ENV_REFRESH_MINUTES = "ASCII_MOON_REFRESH_MINUTES"
ENV_LANGUAGE = "ASCII_MOON_LANGUAGE"

# xterm-style "foreground;background" color indices that denote a dark background
_DARK_BACKGROUNDS = frozenset({0, 1, 2, 3, 4, 5, 6, 8})


@dataclass(frozen=True)
class AppConfig:
    """Validated configuration. Theme is always light or dark here."""

    start_date: date | None  # None = follow the current date
    lines: int | None  # Print-mode height; None = interactive mode
    refresh_minutes: int  # 0 disables the refresh timer
    hide_dark: bool
    poems_dir: Path | None
    theme: Theme
    labels: bool = False
    language_index: int = 0


def parse_date(text: str) -> date:
    """Parse a YYYY-MM-DD string.

    Raises:
        ConfigError: If the string is not a valid calendar date.
    """
    try:
        return datetime.strptime(text.strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ConfigError(f"Invalid date {text!r}. Use YYYY-MM-DD") from exc


def parse_refresh(value: str | int) -> int:
    """Parse a refresh period in minutes (0 disables).

    Raises:
        ConfigError: If the value is not a non-negative integer.
    """
    try:
        minutes = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid refresh period {value!r}: expected minutes") from exc
    if minutes < 0:
        raise ConfigError(f"Refresh period cannot be negative (got {minutes})")
    return minutes


def parse_theme(value: str | Theme) -> Theme:
    try:
        return Theme(str(getattr(value, "value", value)).strip().lower())
    except ValueError as exc:
        raise ConfigError(f"Unknown theme {value!r}. Use light, dark or auto") from exc


def resolve_theme(theme: Theme, environ: Mapping[str, str] | None = None) -> Theme:
    """Turn Theme.AUTO into a concrete light/dark value.

    Uses the COLORFGBG convention ("15;0" = light text on a black background).
    Anything unrecognised resolves to dark.
    """
    if theme is not Theme.AUTO:
        return theme
    env = os.environ if environ is None else environ
    colorfgbg = env.get("COLORFGBG", "")
    background = colorfgbg.split(";")[-1].strip() if colorfgbg else ""
    if not background.isdigit():
        logger.debug("COLORFGBG unset or unparsable (%r); using dark theme", colorfgbg)
        return Theme.DARK
    return Theme.DARK if int(background) in _DARK_BACKGROUNDS else Theme.LIGHT


def build_config(
    *,
    date_text: str | None = None,
    lines: int | None = None,
    refresh_minutes: str | int | None = None,
    hide_dark: bool = False,
    poems_dir: str | Path | None = None,
    theme: str | Theme | None = None,
    labels: bool = False,
    language: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Merge CLI values with environment defaults and validate them.

    CLI values win; unset values fall back to ASCII_MOON_* environment
    variables, then to built-in defaults.

    Raises:
        ConfigError: On an invalid date, height, refresh period, theme or language.
    """
    env = os.environ if environ is None else environ

    start_date = parse_date(date_text) if date_text else None

    if lines is not None:
        check_height(lines)

    if refresh_minutes is None:
        refresh_minutes = env.get(ENV_REFRESH_MINUTES, DEFAULT_REFRESH_MINUTES)
    minutes = parse_refresh(refresh_minutes)

    if poems_dir is None and env.get(ENV_POEMS_DIR):
        poems_dir = env[ENV_POEMS_DIR]

    resolved_theme = resolve_theme(
        parse_theme(theme or env.get(ENV_THEME) or Theme.AUTO), env
    )

    language = language or env.get(ENV_LANGUAGE) or "en"
    try:
        language_index = index_for_code(language)
    except CatalogLookupError as exc:
        raise ConfigError(str(exc)) from exc

    return AppConfig(
        start_date=start_date,
        lines=lines,
        refresh_minutes=minutes,
        hide_dark=hide_dark,
        poems_dir=Path(poems_dir) if poems_dir else None,
        theme=resolved_theme,
        labels=labels,
        language_index=language_index,
    )
