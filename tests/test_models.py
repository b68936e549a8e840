"""Tests for the shared data model."""

from asciimoon.models import (
    BLANK,
    DiscGrid,
    Glyph,
    LabelPlacement,
    PoemLibrary,
    StyleTag,
)


def _grid() -> DiscGrid:
    lit = Glyph("@", StyleTag.LIT)
    dark = Glyph(".", StyleTag.UNLIT)
    return DiscGrid(rows=((lit, dark, BLANK), (dark, lit, lit)), disc_columns=3)


def test_grid_shape_and_text() -> None:
    grid = _grid()
    assert (grid.height, grid.width) == (2, 3)
    assert grid.text() == "@. \n.@@"
    assert grid.count(StyleTag.LIT) == 3


def test_pad_keeps_disc_position() -> None:
    padded = _grid().pad(2, 1)
    assert padded.width == 6
    assert padded.disc_left == 2
    assert padded.disc_width == 3
    assert padded.text() == "  @.  \n  .@@ "


def test_mirrored() -> None:
    mirrored = _grid().pad(2, 1).mirrored()
    assert mirrored.text() == "  .@  \n @@.  "
    assert mirrored.disc_left == 1
    assert mirrored.mirrored() == _grid().pad(2, 1)


def test_label_cells() -> None:
    placement = LabelPlacement(
        feature_id="tycho",
        text="Tycho",
        anchor=(3, 4),
        connector=(3, 5),
        origin=(3, 6),
        text_width=5,
    )
    assert placement.cells() == frozenset({(3, c) for c in range(4, 11)})


def test_empty_library() -> None:
    library = PoemLibrary()
    assert library.for_language("en") == ()
    assert library.find("en/anything") is None
    assert library.find(None) is None
