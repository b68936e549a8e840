from datetime import datetime

import pytest
from pytz import utc

from asciimoon.models import Poem, PoemLibrary

_ENV_VARS = (
    "ASCII_MOON_THEME",
    "ASCII_MOON_POEMS_DIR",
    "ASCII_MOON_REFRESH_MINUTES",
    "ASCII_MOON_LANGUAGE",
    "COLORFGBG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's ASCII_MOON_* settings out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> datetime:
    """A fixed wall-clock instant (UTC)."""
    return datetime(2025, 12, 4, 12, 0, tzinfo=utc)


def _poem(poem_id: str, language: str) -> Poem:
    return Poem(
        id=poem_id,
        title=f"Title {poem_id}",
        author="Anon",
        body=("first line", "second line", "third line"),
        language=language,
    )


@pytest.fixture
def library() -> PoemLibrary:
    """Two English poems, one French poem, nothing for the other languages."""
    return PoemLibrary(
        by_language={
            "en": (_poem("en/one", "en"), _poem("en/two", "en")),
            "fr": (_poem("fr/seul", "fr"),),
        }
    )
