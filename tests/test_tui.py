"""Tests for the interactive view helpers and the event loop, run without a terminal."""

from datetime import datetime
from types import SimpleNamespace

import pytest

from asciimoon import state as state_module
from asciimoon import tui
from asciimoon.config import AppConfig
from asciimoon.errors import SizeError
from asciimoon.models import InteractionState, PoemLibrary, Theme
from asciimoon.state import Event
from asciimoon.tui import (
    REVEAL_SECONDS,
    PoemReveal,
    centre_column,
    draw_window_box,
    safe_addstr,
    trim_cells,
    wait_milliseconds,
)


class FakeWindow:
    """Just enough of a curses window for drawing and the event loop."""

    def __init__(self, height: int = 40, width: int = 120) -> None:
        self.height = height
        self.width = width
        self.writes: list[tuple[int, int, str, int]] = []
        self.timeouts: list[int] = []
        self.erase_count = 0

    def getmaxyx(self) -> tuple[int, int]:
        return self.height, self.width

    def addstr(self, y: int, x: int, text: str, attr: int = 0) -> None:
        self.writes.append((y, x, text, attr))

    def derwin(self, height: int, width: int, y: int, x: int) -> "FakeWindow":
        return FakeWindow(height, width)

    def timeout(self, milliseconds: int) -> None:
        self.timeouts.append(milliseconds)

    def erase(self) -> None:
        self.erase_count += 1

    def box(self) -> None:
        pass

    def refresh(self) -> None:
        pass


@pytest.fixture
def loop(monkeypatch: pytest.MonkeyPatch):
    """Drive tui.run with scripted keys and a fake monotonic clock.

    Returns a function taking (config, script) where script is a list of
    (seconds that pass while waiting, key or None for a timeout). Once the
    script runs out, "q" is pressed.
    """
    clock = [0.0]
    seen: list[Event] = []

    def record(state, event, **kwargs):
        seen.append(event)
        return state_module.transition(state, event, **kwargs)

    monkeypatch.setattr(tui, "time", SimpleNamespace(monotonic=lambda: clock[0]))
    monkeypatch.setattr(tui, "transition", record)
    monkeypatch.setattr(tui, "init_color_support", lambda theme: {})
    monkeypatch.setattr(tui.curses, "curs_set", lambda visibility: None)

    def drive(config: AppConfig, script, window: FakeWindow | None = None):
        window = window or FakeWindow()
        keys = iter(script)

        def read_key(stdscr):
            seconds, key = next(keys, (0.0, "q"))
            clock[0] += seconds
            return key

        monkeypatch.setattr(tui, "_read_key", read_key)
        final = tui.run(window, config, PoemLibrary())
        return final, window, seen

    return drive


def _config(refresh_minutes: int) -> AppConfig:
    return AppConfig(
        start_date=None,
        lines=None,
        refresh_minutes=refresh_minutes,
        hide_dark=False,
        poems_dir=None,
        theme=Theme.DARK,
    )


def test_reveal_starts_when_poem_changes(clock: datetime, library: PoemLibrary) -> None:
    state = InteractionState(current=clock, poem_panel_on=True, current_poem_id="en/one")
    reveal = PoemReveal()
    assert reveal.pending(state, library)
    assert reveal.advance(state, library, 100.0)
    assert reveal.poem_id == "en/one"
    assert reveal.revealed == 0


def test_reveal_steps_one_line_per_interval(clock: datetime, library: PoemLibrary) -> None:
    state = InteractionState(current=clock, poem_panel_on=True, current_poem_id="en/one")
    reveal = PoemReveal()
    reveal.advance(state, library, 100.0)
    assert not reveal.advance(state, library, 100.0 + REVEAL_SECONDS / 2)
    assert reveal.advance(state, library, 100.0 + REVEAL_SECONDS)
    assert reveal.revealed == 1


def test_reveal_finishes(clock: datetime, library: PoemLibrary) -> None:
    state = InteractionState(current=clock, poem_panel_on=True, current_poem_id="en/one")
    reveal = PoemReveal()
    reveal.advance(state, library, 0.0)
    for step in range(1, 10):
        reveal.advance(state, library, step * REVEAL_SECONDS)
    assert reveal.revealed == len(library.find("en/one").body)
    assert not reveal.pending(state, library)


def test_closing_panel_resets_reveal(clock: datetime, library: PoemLibrary) -> None:
    state = InteractionState(current=clock, poem_panel_on=True, current_poem_id="en/one")
    reveal = PoemReveal()
    reveal.advance(state, library, 0.0)
    closed = state.evolve(poem_panel_on=False)
    assert not reveal.pending(closed, library)
    assert reveal.advance(closed, library, 1.0)
    assert reveal.poem_id is None


def test_trim_cells_counts_wide_characters() -> None:
    assert trim_cells("Tycho", 3) == "Tyc"
    assert trim_cells("雨の海", 5) == "雨の"
    assert trim_cells("雨の海", 6) == "雨の海"
    assert trim_cells("雨の海", 0) == ""


def test_centre_column_uses_cell_width() -> None:
    assert centre_column(20, "ab") == 9
    assert centre_column(20, "日付") == 8
    assert centre_column(4, "a long caption") == 1


def test_safe_addstr_trims_wide_text() -> None:
    window = FakeWindow(3, 10)
    safe_addstr(window, 1, 2, "雨の海雨の海")
    assert window.writes == [(1, 2, "雨の海", 0)]


def test_safe_addstr_skips_cells_outside_window() -> None:
    window = FakeWindow(3, 10)
    safe_addstr(window, 3, 0, "x")
    safe_addstr(window, 0, 10, "x")
    assert window.writes == []


def test_window_title_is_trimmed_by_cells() -> None:
    window = FakeWindow(5, 10)
    draw_window_box(window, "詳細詳細詳細")
    assert window.writes == [(0, 2, " 詳細詳", 0)]


@pytest.mark.parametrize(
    ("tick_remaining", "reveal_pending", "expected"),
    [
        (None, False, -1),
        (None, True, int(REVEAL_SECONDS * 1000)),
        (12.5, False, 12500),
        (-3.0, False, 0),
        (40000 * 60.0, False, 60000),
        (40000 * 60.0, True, int(REVEAL_SECONDS * 1000)),
    ],
)
def test_wait_milliseconds(tick_remaining, reveal_pending, expected) -> None:
    assert wait_milliseconds(tick_remaining, reveal_pending) == expected


def test_long_refresh_period_keeps_curses_timeouts_bounded(loop) -> None:
    final, window, _ = loop(_config(40000), [(0.0, "l")])
    assert final.labels_on
    assert not final.running
    assert window.timeouts
    assert all(0 <= ms <= 60000 for ms in window.timeouts)


def test_refresh_tick_fires_when_due(loop) -> None:
    _, _, seen = loop(_config(1), [(61.0, None)])
    assert Event.TICK in seen


def test_no_tick_before_refresh_period(loop) -> None:
    _, _, seen = loop(_config(1), [(30.0, None)])
    assert Event.TICK not in seen


def test_follow_now_restarts_refresh_timer(loop) -> None:
    _, _, seen = loop(_config(1), [(50.0, "n"), (20.0, None)])
    assert Event.FOLLOW_NOW in seen
    assert Event.TICK not in seen


def test_disabled_refresh_blocks_on_keys(loop) -> None:
    _, window, seen = loop(_config(0), [(600.0, None)])
    assert set(window.timeouts) == {-1}
    assert Event.TICK not in seen


def test_resize_redraws(loop) -> None:
    _, window, _ = loop(_config(0), [(0.0, "KEY_RESIZE")])
    assert window.erase_count == 2


def test_unknown_keys_do_not_redraw(loop) -> None:
    _, window, seen = loop(_config(0), [(0.0, "z")])
    assert window.erase_count == 1
    assert seen == [Event.QUIT]


def test_terminal_too_small_at_startup(loop) -> None:
    with pytest.raises(SizeError):
        loop(_config(0), [], window=FakeWindow(8, 20))
