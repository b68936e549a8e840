"""Interactive curses view — an explicit event queue feeding the state machine.

Layout: the moon fills the main area, an optional poem panel sits on the right,
and an optional details panel runs along the bottom. Every key press and every
refresh tick becomes one queued Event; events are consumed one at a time and
each frame is drawn from the resulting immutable snapshot.
"""

from __future__ import annotations

import curses
import logging
import time
from collections import deque
from dataclasses import dataclass

from asciimoon.compute import compute_phase, now
from asciimoon.config import AppConfig
from asciimoon.errors import TerminalError
from asciimoon.i18n import language_code, language_name, t
from asciimoon.models import DiscGrid, InteractionState, Mode, PoemLibrary, StyleTag, Theme
from asciimoon.poems import panel_lines
from asciimoon.renderers.disc import ASPECT, MIN_HEIGHT, check_height, disc_width, render_frame
from asciimoon.renderers.labels import cell_width
from asciimoon.state import Event, event_for_key, initial_state, render_options, transition

logger = logging.getLogger(__name__)

REVEAL_SECONDS = 0.7  # One poem line appears per interval
_INFO_HEIGHT = 10
_MIN_POEM_WIDTH = 28
_MAX_WAIT_SECONDS = 60.0  # curses timeouts are C ints in milliseconds


@dataclass
class PoemReveal:
    """Line-by-line reveal of the poem currently on screen."""

    poem_id: str | None = None
    revealed: int = 0
    last_step: float = 0.0

    def pending(self, state: InteractionState, poems: PoemLibrary) -> bool:
        poem = poems.find(state.current_poem_id)
        if not state.poem_panel_on or poem is None:
            return False
        return state.current_poem_id != self.poem_id or self.revealed < len(poem.body)

    def advance(self, state: InteractionState, poems: PoemLibrary, clock: float) -> bool:
        """Step the animation; True when the panel needs a redraw."""
        if not state.poem_panel_on:
            if self.poem_id is not None:
                self.poem_id = None
                return True
            return False
        if state.current_poem_id != self.poem_id:
            self.poem_id = state.current_poem_id
            self.revealed = 0
            self.last_step = clock
            return True
        poem = poems.find(self.poem_id)
        if poem is None or self.revealed >= len(poem.body):
            return False
        if clock - self.last_step >= REVEAL_SECONDS:
            self.revealed += 1
            self.last_step = clock
            return True
        return False


def _palette(theme: Theme, colors: int) -> dict[StyleTag, tuple[int, int]]:
    """(curses color, extra attributes) per style tag."""
    grey = 8 if colors >= 16 else curses.COLOR_WHITE
    if theme is Theme.LIGHT:
        return {
            StyleTag.LIT: (curses.COLOR_YELLOW, 0),
            StyleTag.UNLIT: (250 if colors >= 256 else curses.COLOR_WHITE, 0),
            StyleTag.LABEL: (curses.COLOR_BLUE, curses.A_BOLD),
            StyleTag.ANCHOR: (curses.COLOR_RED, curses.A_BOLD),
            StyleTag.CONNECTOR: (curses.COLOR_RED, 0),
            StyleTag.POEM_TITLE: (curses.COLOR_MAGENTA, curses.A_BOLD),
            StyleTag.POEM_BODY: (curses.COLOR_BLACK, 0),
            StyleTag.POEM_ACCENT: (grey, 0),
        }
    return {
        StyleTag.LIT: (curses.COLOR_YELLOW, curses.A_BOLD),
        StyleTag.UNLIT: (grey, curses.A_DIM if grey == curses.COLOR_WHITE else 0),
        StyleTag.LABEL: (curses.COLOR_CYAN, curses.A_BOLD),
        StyleTag.ANCHOR: (curses.COLOR_RED, curses.A_BOLD),
        StyleTag.CONNECTOR: (curses.COLOR_RED, 0),
        StyleTag.POEM_TITLE: (curses.COLOR_MAGENTA, curses.A_BOLD),
        StyleTag.POEM_BODY: (curses.COLOR_WHITE, 0),
        StyleTag.POEM_ACCENT: (grey, 0),
    }


def init_color_support(theme: Theme) -> dict[StyleTag, int]:
    """Configure one color pair per style tag; plain attributes without color support."""
    attrs: dict[StyleTag, int] = {StyleTag.BLANK: curses.A_NORMAL}
    plain = {tag: extra for tag, (_, extra) in _palette(theme, 8).items()}
    if not curses.has_colors():
        return attrs | plain

    try:
        curses.start_color()
        curses.use_default_colors()
    except curses.error:
        return attrs | plain

    palette = _palette(theme, curses.COLORS)
    for index, (tag, (color, extra)) in enumerate(palette.items(), start=1):
        try:
            curses.init_pair(index, color, -1)
            attrs[tag] = curses.color_pair(index) | extra
        except curses.error:
            attrs[tag] = extra
    return attrs


def trim_cells(text: str, cells: int) -> str:
    """Longest prefix of text that fits in the given number of terminal cells."""
    used = 0
    for index, ch in enumerate(text):
        used += cell_width(ch)
        if used > cells:
            return text[:index]
    return text


def centre_column(width: int, text: str) -> int:
    return max(1, (width - cell_width(text)) // 2)


def safe_addstr(win: curses.window, y: int, x: int, text: str, attr: int = 0) -> None:
    height, width = win.getmaxyx()
    if y < 0 or x < 0 or y >= height or x >= width:
        return
    trimmed = trim_cells(text, max(0, width - x - 1))
    if trimmed:
        try:
            win.addstr(y, x, trimmed, attr)
        except curses.error:
            pass


def draw_window_box(win: curses.window, title: str) -> None:
    win.box()
    title = trim_cells(title, max(0, win.getmaxyx()[1] - 4))
    safe_addstr(win, 0, 2, f" {title} ")


def draw_grid(
    win: curses.window, grid: DiscGrid, top: int, left: int, attrs: dict[StyleTag, int]
) -> None:
    for r, row in enumerate(grid.rows):
        for c, glyph in enumerate(row):
            # "" marks the second cell of a wide character already drawn
            if glyph.char and glyph.char != " ":
                safe_addstr(win, top + r, left + c, glyph.char, attrs.get(glyph.style, 0))


def draw_info(
    win: curses.window, state: InteractionState, attrs: dict[StyleTag, int]
) -> None:
    lang = language_code(state.language_index)
    phase = compute_phase(state.current)
    mode = t("mode_now" if state.mode is Mode.NOW else "mode_manual", lang)
    lines = [
        (t("label_date", lang), state.current_date.isoformat()),
        (t("label_mode", lang), mode),
        (t("label_phase", lang), t(phase.name, lang)),
        (t("label_age", lang), t("age_days", lang).format(days=phase.age_days)),
        (t("label_illumination", lang), f"{phase.illuminated_percent:.1f}%"),
        (t("label_language", lang), language_name(state.language_index)),
    ]
    draw_window_box(win, t("info_title", lang))
    _, width = win.getmaxyx()
    for i, (caption, value) in enumerate(lines, start=1):
        text = f"{caption}: {value}"
        safe_addstr(win, i, centre_column(width, text), text, curses.A_BOLD)
    help_text = t("help", lang)
    safe_addstr(
        win,
        len(lines) + 2,
        centre_column(width, help_text),
        help_text,
        attrs.get(StyleTag.POEM_ACCENT, 0),
    )


def draw_poem(
    win: curses.window,
    state: InteractionState,
    poems: PoemLibrary,
    reveal: PoemReveal,
    attrs: dict[StyleTag, int],
) -> None:
    lang = language_code(state.language_index)
    draw_window_box(win, t("poem_title", lang))
    height, width = win.getmaxyx()
    poem = poems.find(state.current_poem_id)
    revealed = reveal.revealed if reveal.poem_id == state.current_poem_id else 0
    for i, (text, style) in enumerate(panel_lines(poem, width - 4, state.language_index, revealed)):
        if i + 1 >= height - 1:
            break
        safe_addstr(win, i + 1, 2, text, attrs.get(style, 0))


def _layout(state: InteractionState, height: int, width: int) -> tuple[int, int, int, int, int]:
    """(info height, poem width, moon area rows, moon area columns, moon rows)."""
    info_height = _INFO_HEIGHT if state.info_panel_on else 0
    poem_width = max(_MIN_POEM_WIDTH, width // 3) if state.poem_panel_on else 0
    area_rows = height - info_height - 2
    area_cols = width - poem_width - 2
    moon_rows = min(area_rows, int(area_cols / ASPECT))
    return info_height, poem_width, area_rows, area_cols, moon_rows


def draw_frame(
    stdscr: curses.window,
    state: InteractionState,
    poems: PoemLibrary,
    reveal: PoemReveal,
    theme: Theme,
    attrs: dict[StyleTag, int],
) -> None:
    """Draw one full frame from a state snapshot."""
    stdscr.erase()
    height, width = stdscr.getmaxyx()

    info_height, poem_width, area_rows, area_cols, moon_rows = _layout(state, height, width)
    if moon_rows < MIN_HEIGHT:
        safe_addstr(stdscr, 0, 0, t("too_small", language_code(state.language_index)))
        stdscr.refresh()
        return

    options = render_options(state, moon_rows, theme)
    margin = max(0, (area_cols - disc_width(moon_rows)) // 2)
    grid = render_frame(compute_phase(state.current), options, margin=margin)
    draw_grid(stdscr, grid, 1 + (area_rows - moon_rows) // 2, 1, attrs)

    if poem_width:
        poem_win = stdscr.derwin(height - info_height, poem_width, 0, width - poem_width)
        draw_poem(poem_win, state, poems, reveal, attrs)
    if info_height:
        info_win = stdscr.derwin(info_height, width, height - info_height, 0)
        draw_info(info_win, state, attrs)

    stdscr.refresh()


def _read_key(stdscr: curses.window) -> str | None:
    try:
        key = stdscr.get_wch()
    except curses.error:
        return None  # Timed out
    if isinstance(key, int):
        return curses.keyname(key).decode("ascii", "replace")
    return key


def wait_milliseconds(tick_remaining: float | None, reveal_pending: bool) -> int:
    """curses timeout for the next key read; -1 blocks until a key arrives.

    Waits are capped at _MAX_WAIT_SECONDS. The loop re-checks the refresh
    timer after every wake-up, so long refresh periods still tick on time.
    """
    waits: list[float] = []
    if tick_remaining is not None:
        waits.append(max(0.0, tick_remaining))
    if reveal_pending:
        waits.append(REVEAL_SECONDS)
    if not waits:
        return -1
    return int(min(min(waits), _MAX_WAIT_SECONDS) * 1000)


def run(stdscr: curses.window, config: AppConfig, poems: PoemLibrary) -> InteractionState:
    """Event loop. Returns the final state once a QUIT event is processed.

    Raises:
        SizeError: If the terminal is too small for the smallest disc at startup.
    """
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    attrs = init_color_support(config.theme)

    state = initial_state(
        config.start_date,
        now(),
        hide_dark=config.hide_dark,
        labels_on=config.labels,
        language_index=config.language_index,
    )
    check_height(_layout(state, *stdscr.getmaxyx())[4])
    events: deque[Event] = deque()
    reveal = PoemReveal()
    tick_seconds = config.refresh_minutes * 60 if config.refresh_minutes else None
    last_tick = time.monotonic()
    needs_redraw = True
    logger.debug("Starting interactive view: %s", state)

    while state.running:
        if needs_redraw:
            draw_frame(stdscr, state, poems, reveal, config.theme, attrs)
            needs_redraw = False

        tick_remaining = (
            tick_seconds - (time.monotonic() - last_tick) if tick_seconds is not None else None
        )
        stdscr.timeout(wait_milliseconds(tick_remaining, reveal.pending(state, poems)))

        key = _read_key(stdscr)
        if key == "KEY_RESIZE":
            needs_redraw = True
        elif key is not None:
            event = event_for_key(key)
            if event is None:
                logger.debug("Ignoring key %r", key)
            else:
                events.append(event)

        if tick_seconds is not None and time.monotonic() - last_tick >= tick_seconds:
            last_tick = time.monotonic()
            events.append(Event.TICK)

        while events:
            event = events.popleft()
            next_state = transition(state, event, now=now(), poems=poems)
            if event is Event.FOLLOW_NOW:
                last_tick = time.monotonic()
            if next_state != state:
                needs_redraw = True
            state = next_state

        if reveal.advance(state, poems, time.monotonic()):
            needs_redraw = True

    return state


def run_interactive(config: AppConfig, poems: PoemLibrary) -> InteractionState:
    """Enter curses, run the event loop, and always restore the terminal.

    Raises:
        TerminalError: If the terminal cannot be put into interactive mode.
        SizeError: If the terminal is too small for the smallest disc.
    """
    try:
        return curses.wrapper(run, config, poems)
    except curses.error as exc:
        raise TerminalError(f"Cannot start interactive terminal: {exc}") from exc
