"""Command-line entry point: one-shot print mode or the interactive curses view."""

import logging
import shutil
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

load_dotenv()

from asciimoon.compute import compute_phase, instant_for, now  # noqa: E402
from asciimoon.config import AppConfig, build_config  # noqa: E402
from asciimoon.errors import AsciiMoonError, ConfigError, TerminalError  # noqa: E402
from asciimoon.features import LUNAR_FEATURES  # noqa: E402
from asciimoon.i18n import label_for  # noqa: E402
from asciimoon.models import RenderOptions  # noqa: E402
from asciimoon.poems import load_poems  # noqa: E402
from asciimoon.renderers.ansi import grid_to_lines  # noqa: E402
from asciimoon.renderers.disc import ASPECT, MIN_HEIGHT, disc_width, render_frame  # noqa: E402
from asciimoon.renderers.labels import cell_width  # noqa: E402

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(name)s - %(levelname)s - %(message)s"
_HANDLER_NAME = "asciimoon"


def configure_logging(debug: bool, log_file: Path | None) -> None:
    """Route asciimoon logs to stderr or a file (DEBUG with --debug, else WARNING)."""
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(existing)
            existing.close()
    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("asciimoon").setLevel(logging.DEBUG if debug else logging.WARNING)


def _silence_stderr_logging() -> None:
    """Drop stderr handlers so log lines never land on the curses screen."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if handler.get_name() == _HANDLER_NAME and not isinstance(
            handler, logging.FileHandler
        ):
            root_logger.removeHandler(handler)
    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())


def fit_height(lines: int, columns: int) -> int:
    """Shrink the requested height so the disc fits the terminal width."""
    if disc_width(lines) <= columns:
        return lines
    return max(MIN_HEIGHT, int(columns / ASPECT))


def _label_margin(language_index: int) -> int:
    widest = max(cell_width(label_for(f.id, language_index)) for f in LUNAR_FEATURES)
    return widest + 2


def render_print(config: AppConfig, columns: int) -> list[str]:
    """Render the moon once for print mode.

    Args:
        config: Validated configuration; config.lines must be set.
        columns: Terminal width available for the output, label margins included.

    Returns:
        ANSI-styled lines ready for click.echo().

    Raises:
        ValueError: If config.lines is None (interactive configuration).
    """
    if config.lines is None:
        raise ValueError("Print mode needs a line count")
    margin = _label_margin(config.language_index) if config.labels else 0
    when = instant_for(config.start_date) if config.start_date else now()
    phase = compute_phase(when)
    options = RenderOptions(
        height_rows=fit_height(config.lines, columns - 2 * margin),
        hide_dark=config.hide_dark,
        theme=config.theme,
        show_labels=config.labels,
        language_index=config.language_index,
    )
    logger.debug("Print mode: %s at %s -> %s", options, when, phase)
    grid = render_frame(phase, options, margin=margin)
    return grid_to_lines(grid, config.theme)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="ascii-moon")
@click.option("-d", "--date", "date_text", help="Date in YYYY-MM-DD format (defaults to today).")
@click.option(
    "--lines",
    type=int,
    default=None,
    help="Print the moon at this many lines and exit (non-interactive).",
)
@click.option(
    "--refresh-minutes",
    default=None,
    help="Auto-refresh period in interactive mode (0 disables). Default: 5.",
)
@click.option("--hide-dark", is_flag=True, help="Render the unlit part of the moon as blank.")
@click.option(
    "--poems-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory with <lang>/*.txt poems (defaults to ./poems).",
)
@click.option(
    "--theme",
    type=click.Choice(["light", "dark", "auto"], case_sensitive=False),
    default=None,
    help="Color theme; auto reads COLORFGBG.",
)
@click.option("--labels", is_flag=True, help="Show lunar feature labels.")
@click.option("--language", default=None, help="Label language: en, zh, fr, ja or es.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write logs to this file.",
)
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def main(
    date_text: str | None,
    lines: int | None,
    refresh_minutes: str | None,
    hide_dark: bool,
    poems_dir: Path | None,
    theme: str | None,
    labels: bool,
    language: str | None,
    log_file: Path | None,
    debug: bool,
) -> None:
    """Show the current phase of the Moon as ASCII art."""
    configure_logging(debug, log_file)
    try:
        config = build_config(
            date_text=date_text,
            lines=lines,
            refresh_minutes=refresh_minutes,
            hide_dark=hide_dark,
            poems_dir=poems_dir,
            theme=theme,
            labels=labels,
            language=language,
        )
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc
    logger.debug("Resolved configuration: %s", config)

    try:
        if config.lines is not None:
            columns = shutil.get_terminal_size((80, 24)).columns
            for line in render_print(config, columns):
                click.echo(line)
            return

        if not sys.stdout.isatty():
            raise TerminalError("Interactive mode needs a terminal; use --lines N to print")
        poems = load_poems(config.poems_dir)
        if log_file is None:
            _silence_stderr_logging()

        from asciimoon.tui import run_interactive

        run_interactive(config, poems)
    except AsciiMoonError as exc:
        logger.debug("Fatal error", exc_info=True)
        raise click.ClickException(str(exc)) from exc


if __name__ == "__main__":
    main()
