"""Tests for poem parsing, loading, and the panel text."""

import logging
import random
from pathlib import Path

import pytest

from asciimoon.errors import PoemLoadWarning
from asciimoon.i18n import t
from asciimoon.models import PoemLibrary, StyleTag
from asciimoon.poems import (
    BUNDLED_POEMS_DIR,
    load_poems,
    load_poems_from_dir,
    panel_lines,
    parse_poem_text,
    pick,
)
from asciimoon.renderers.labels import cell_width


@pytest.fixture
def poems_dir(tmp_path: Path) -> Path:
    """A custom poem directory with one good and one malformed English poem."""
    english = tmp_path / "en"
    english.mkdir()
    (english / "good.txt").write_text("Moonrise\nA. Poet\n---\nLine one\nLine two\n", encoding="utf-8")
    (english / "bad.txt").write_text("Only a title\n", encoding="utf-8")
    (tmp_path / "xx").mkdir()
    (tmp_path / "xx" / "ignored.txt").write_text("T\nA\nbody\n", encoding="utf-8")
    return tmp_path


def test_parse_with_separator() -> None:
    poem = parse_poem_text("Title\nAuthor\n---\nfirst\nsecond\n", "en/x", "en")
    assert poem.id == "en/x"
    assert poem.title == "Title"
    assert poem.author == "Author"
    assert poem.body == ("first", "second")
    assert poem.language == "en"


def test_parse_without_separator() -> None:
    poem = parse_poem_text("Title\nAuthor\nfirst\n", "en/x", "en")
    assert poem.body == ("first",)


def test_parse_keeps_inner_blank_lines_and_drops_trailing_ones() -> None:
    poem = parse_poem_text("T\nA\n---\none\n\ntwo\n\n\n", "en/x", "en")
    assert poem.body == ("one", "", "two")


def test_parse_strips_control_characters() -> None:
    poem = parse_poem_text("Ti\x1b[31mtle\r\nAuthor\r\n---\r\nbo\x07dy\r\n", "en/x", "en")
    assert poem.title == "Ti[31mtle"
    assert poem.body == ("body",)


@pytest.mark.parametrize("text", ["", "Title only\n", "Title\nAuthor\n---\n", "\nAuthor\nbody\n"])
def test_malformed_poems_are_rejected(text: str) -> None:
    with pytest.raises(PoemLoadWarning):
        parse_poem_text(text, "en/x", "en")


def test_load_from_dir_skips_bad_files(poems_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="asciimoon.poems"):
        library = load_poems_from_dir(poems_dir)
    assert [p.id for p in library.for_language("en")] == ["en/good"]
    assert "xx" not in library.by_language
    assert "bad.txt" in caplog.text


def test_custom_poems_win_per_language(poems_dir: Path) -> None:
    library = load_poems(poems_dir)
    assert [p.id for p in library.for_language("en")] == ["en/good"]
    assert len(library.for_language("fr")) >= 2
    assert all(p.id.startswith("fr/") for p in library.for_language("fr"))


def test_missing_directory_falls_back_to_bundled(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="asciimoon.poems"):
        library = load_poems(tmp_path / "missing")
    assert sorted(library.by_language) == ["en", "es", "fr", "ja", "zh"]
    assert "does not exist" in caplog.text


def test_bundled_poems_cover_every_language() -> None:
    library = load_poems_from_dir(BUNDLED_POEMS_DIR)
    for code in ("en", "zh", "fr", "ja", "es"):
        assert len(library.for_language(code)) >= 2
    verlaine = library.find("fr/la_lune_blanche_verlaine")
    assert verlaine is not None
    assert "" in verlaine.body


def test_pick_excludes_current_poem() -> None:
    library = load_poems_from_dir(BUNDLED_POEMS_DIR)
    current = library.for_language("en")[0]
    rng = random.Random(7)
    for _ in range(20):
        assert pick(library, "en", exclude_id=current.id, rng=rng).id != current.id


def test_pick_without_poems_returns_none() -> None:
    assert pick(PoemLibrary(), "en") is None


def test_panel_lines_reveal_body_progressively(library: PoemLibrary) -> None:
    poem = library.find("en/one")
    lines = panel_lines(poem, 40, 0, revealed=1)
    assert lines[0] == ("Title en/one", StyleTag.POEM_TITLE)
    assert lines[1][1] is StyleTag.POEM_ACCENT
    assert "Anon" in lines[1][0]
    body = lines[3:]
    assert body == [
        ("first line", StyleTag.POEM_BODY),
        ("", StyleTag.BLANK),
        ("", StyleTag.BLANK),
    ]


def test_panel_lines_placeholder_without_poem() -> None:
    assert panel_lines(None, 40, 2) == [(t("no_poems", "fr"), StyleTag.POEM_ACCENT)]


def test_panel_lines_wrap_wide_text() -> None:
    poem = parse_poem_text("静夜思\n李白\n---\n床前明月光\n", "zh/x", "zh")
    lines = panel_lines(poem, 4, 1)
    body = [text for text, style in lines if style is StyleTag.POEM_BODY]
    assert "".join(body) == "床前明月光"
    assert all(cell_width(text) <= 4 for text in body)
