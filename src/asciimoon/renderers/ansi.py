"""ANSI text renderer for print mode (scripts, MOTD banners)."""

from itertools import groupby

import click

from asciimoon.models import DiscGrid, StyleTag, Theme

# click.style keyword arguments per style tag
PALETTES: dict[Theme, dict[StyleTag, dict]] = {
    Theme.DARK: {
        StyleTag.LIT: {"fg": "bright_yellow"},
        StyleTag.UNLIT: {"fg": "bright_black"},
        StyleTag.LABEL: {"fg": "cyan", "bold": True},
        StyleTag.ANCHOR: {"fg": "red", "bold": True},
        StyleTag.CONNECTOR: {"fg": "red"},
        StyleTag.POEM_TITLE: {"fg": "magenta", "bold": True, "italic": True},
        StyleTag.POEM_BODY: {"fg": "white", "italic": True},
        StyleTag.POEM_ACCENT: {"fg": "bright_black", "italic": True},
    },
    Theme.LIGHT: {
        StyleTag.LIT: {"fg": 136},  # Dark goldenrod reads on a white background
        StyleTag.UNLIT: {"fg": 250},
        StyleTag.LABEL: {"fg": "blue", "bold": True},
        StyleTag.ANCHOR: {"fg": "red", "bold": True},
        StyleTag.CONNECTOR: {"fg": "red"},
        StyleTag.POEM_TITLE: {"fg": "magenta", "bold": True, "italic": True},
        StyleTag.POEM_BODY: {"fg": "black", "italic": True},
        StyleTag.POEM_ACCENT: {"fg": "bright_black", "italic": True},
    },
}


def style_text(text: str, style: StyleTag, theme: Theme) -> str:
    """Wrap text in the ANSI codes of a style tag; blank cells stay unstyled."""
    if style is StyleTag.BLANK or not text:
        return text
    palette = PALETTES.get(theme, PALETTES[Theme.DARK])
    return click.style(text, **palette[style])


def grid_to_lines(grid: DiscGrid, theme: Theme) -> list[str]:
    """Render a DiscGrid as ANSI-styled lines, one run of codes per style change.

    Args:
        grid: Rendered (and optionally labeled) disc.
        theme: Resolved light/dark theme.

    Returns:
        One string per grid row; styles reset at the end of every run.
    """
    lines: list[str] = []
    for row in grid.rows:
        parts = []
        for style, run in groupby(row, key=lambda g: g.style):
            parts.append(style_text("".join(g.char for g in run), style, theme))
        lines.append("".join(parts).rstrip())
    return lines
