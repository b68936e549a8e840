"""Interaction state machine. Key events and timer ticks produce new view snapshots."""

import logging
import random
from datetime import date, datetime, timedelta
from enum import Enum

from asciimoon.compute import as_utc, instant_for
from asciimoon.i18n import cycle_language, language_code
from asciimoon.models import InteractionState, Mode, PoemLibrary, RenderOptions, Theme
from asciimoon.poems import pick

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)


class Event(str, Enum):
    NAV_BACK = "nav_back"
    NAV_FORWARD = "nav_forward"
    FOLLOW_NOW = "follow_now"
    TICK = "tick"
    TOGGLE_LABELS = "toggle_labels"
    CYCLE_LANGUAGE = "cycle_language"
    TOGGLE_HIDE_DARK = "toggle_hide_dark"
    TOGGLE_POEM = "toggle_poem"
    REROLL_POEM = "reroll_poem"
    TOGGLE_INFO = "toggle_info"
    QUIT = "quit"


_KEYMAP: dict[str, Event] = {
    "KEY_LEFT": Event.NAV_BACK,
    "KEY_RIGHT": Event.NAV_FORWARD,
    "n": Event.FOLLOW_NOW,
    "l": Event.TOGGLE_LABELS,
    "L": Event.CYCLE_LANGUAGE,
    "d": Event.TOGGLE_HIDE_DARK,
    "p": Event.TOGGLE_POEM,
    "P": Event.REROLL_POEM,
    "i": Event.TOGGLE_INFO,
    "q": Event.QUIT,
    "\x1b": Event.QUIT,
}


def event_for_key(key: str) -> Event | None:
    """Map a key name ("KEY_LEFT", "q", "\\x1b", ...) to an event. Unknown keys → None."""
    return _KEYMAP.get(key)


def initial_state(
    start_date: date | None,
    now: datetime,
    *,
    hide_dark: bool = False,
    labels_on: bool = False,
    language_index: int = 0,
) -> InteractionState:
    """Startup snapshot: follow the clock, or show a fixed day at noon UTC."""
    if start_date is None:
        return InteractionState(
            current=as_utc(now),
            mode=Mode.NOW,
            hide_dark=hide_dark,
            labels_on=labels_on,
            language_index=language_index,
        )
    return InteractionState(
        current=instant_for(start_date),
        mode=Mode.MANUAL,
        hide_dark=hide_dark,
        labels_on=labels_on,
        language_index=language_index,
    )


def _with_new_poem(
    state: InteractionState,
    poems: PoemLibrary,
    rng: random.Random | None,
    exclude_id: str | None = None,
) -> InteractionState:
    poem = pick(poems, language_code(state.language_index), exclude_id, rng)
    return state.evolve(current_poem_id=poem.id if poem else None)


def transition(
    state: InteractionState,
    event: Event | None,
    *,
    now: datetime,
    poems: PoemLibrary,
    rng: random.Random | None = None,
) -> InteractionState:
    """Apply one event to a snapshot and return the next snapshot.

    Unknown events (None) and any event after QUIT leave the state unchanged.
    In Now mode every other event re-reads the wall clock first, so the view
    reflects the moment of the last event even with the refresh timer disabled.

    Args:
        state: Current snapshot.
        event: Decoded key event or Event.TICK.
        now: Wall-clock instant used in Now mode and by FOLLOW_NOW.
        poems: Loaded poem library for poem selection.
        rng: Random source for poem selection (module random if None).

    Returns:
        The next snapshot.
    """
    if event is None or not state.running:
        return state

    if event is Event.QUIT:
        return state.evolve(running=False)
    if state.mode is Mode.NOW:
        state = state.evolve(current=as_utc(now))
    if event is Event.NAV_BACK:
        return state.evolve(current=state.current - _ONE_DAY, mode=Mode.MANUAL)
    if event is Event.NAV_FORWARD:
        return state.evolve(current=state.current + _ONE_DAY, mode=Mode.MANUAL)
    if event is Event.FOLLOW_NOW:
        return state.evolve(current=as_utc(now), mode=Mode.NOW)
    if event is Event.TICK:
        return state
    if event is Event.TOGGLE_LABELS:
        return state.evolve(labels_on=not state.labels_on)
    if event is Event.TOGGLE_HIDE_DARK:
        return state.evolve(hide_dark=not state.hide_dark)
    if event is Event.TOGGLE_INFO:
        return state.evolve(info_panel_on=not state.info_panel_on)
    if event is Event.CYCLE_LANGUAGE:
        state = state.evolve(language_index=cycle_language(state.language_index))
        if state.poem_panel_on:
            state = _with_new_poem(state, poems, rng)
        return state
    if event is Event.TOGGLE_POEM:
        state = state.evolve(poem_panel_on=not state.poem_panel_on)
        if state.poem_panel_on:
            current = poems.find(state.current_poem_id)
            if current is None or current.language != language_code(state.language_index):
                state = _with_new_poem(state, poems, rng)
        return state
    if event is Event.REROLL_POEM:
        return _with_new_poem(state, poems, rng, exclude_id=state.current_poem_id)

    logger.debug("Ignoring unhandled event %s", event)
    return state


def render_options(state: InteractionState, height_rows: int, theme: Theme) -> RenderOptions:
    """RenderOptions for one frame, taken from an immutable snapshot."""
    return RenderOptions(
        height_rows=height_rows,
        hide_dark=state.hide_dark,
        theme=theme,
        show_labels=state.labels_on,
        language_index=state.language_index,
    )
