"""Lunar feature label overlay — anchors, connectors, and localized text on a DiscGrid."""

from __future__ import annotations

import logging
import unicodedata

from asciimoon.i18n import label_for
from asciimoon.models import DiscGrid, Feature, Glyph, LabelPlacement, StyleTag

logger = logging.getLogger(__name__)

_ANCHOR_CHAR = "+"

# (row offset, column direction) tried in order for each label
_CANDIDATES: tuple[tuple[int, int], ...] = (
    (0, 1),
    (0, -1),
    (-1, 1),
    (-1, -1),
    (1, 1),
    (1, -1),
)

# Connector character keyed by (row offset, column direction)
_CONNECTORS: dict[tuple[int, int], str] = {
    (0, 1): "-",
    (0, -1): "-",
    (-1, 1): "/",
    (-1, -1): "\\",
    (1, 1): "\\",
    (1, -1): "/",
}


def cell_width(text: str) -> int:
    """Terminal cell width of text; East Asian wide characters take two cells."""
    return sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in text)


def project(grid: DiscGrid, feature: Feature) -> tuple[int, int]:
    """Nearest (row, col) cell of a feature's disc coordinate."""
    width = grid.disc_width
    col = int((feature.x + 1.0) / 2.0 * width)
    row = int((1.0 - feature.y) / 2.0 * grid.height)
    col = grid.disc_left + min(max(col, 0), width - 1)
    row = min(max(row, 0), grid.height - 1)
    return row, col


def _candidate(
    feature_id: str,
    anchor: tuple[int, int],
    text: str,
    text_width: int,
    dr: int,
    direction: int,
) -> LabelPlacement:
    row, col = anchor
    connector = (row + dr, col + direction)
    if direction > 0:
        origin = (row + dr, col + 2)
    else:
        origin = (row + dr, col - 1 - text_width)
    return LabelPlacement(
        feature_id=feature_id,
        text=text,
        anchor=anchor,
        connector=connector,
        origin=origin,
        text_width=text_width,
    )


def _in_bounds(grid: DiscGrid, placement: LabelPlacement) -> bool:
    row, col = placement.origin
    if not 0 <= row < grid.height:
        return False
    return col >= 0 and col + placement.text_width <= grid.width


def layout_labels(
    grid: DiscGrid, features: tuple[Feature, ...], language_index: int
) -> tuple[LabelPlacement, ...]:
    """Place feature labels without overlaps.

    Features are handled in priority order. The first candidate position that
    stays inside the grid and touches no earlier label wins; features with no
    such position are omitted. The outcome depends only on the grid size and
    the inputs.

    Args:
        grid: Rendered disc, optionally padded with margins.
        features: Features to label.
        language_index: Language ordinal for label text.

    Returns:
        Placements in priority order, one per feature that fit.
    """
    occupied: set[tuple[int, int]] = set()
    placements: list[LabelPlacement] = []
    for feature in sorted(features, key=lambda f: (f.priority, f.id)):
        text = label_for(feature.id, language_index)
        text_width = cell_width(text)
        anchor = project(grid, feature)
        if anchor in occupied:
            logger.debug("Label %s omitted: anchor cell taken", feature.id)
            continue
        for dr, direction in _CANDIDATES:
            candidate = _candidate(feature.id, anchor, text, text_width, dr, direction)
            if not _in_bounds(grid, candidate):
                continue
            cells = candidate.cells()
            if cells & occupied:
                continue
            placements.append(candidate)
            occupied |= cells
            break
        else:
            logger.debug("Label %s omitted: no free position", feature.id)
    return tuple(placements)


def apply_labels(
    grid: DiscGrid, features: tuple[Feature, ...], language_index: int
) -> DiscGrid:
    """Overlay anchors, connectors, and localized label text onto a grid.

    Only the anchor cell of each label replaces a disc glyph inside the disc;
    connector and text cells overwrite whatever lies beneath them.
    """
    rows = [list(row) for row in grid.rows]
    for placement in layout_labels(grid, features, language_index):
        fid = placement.feature_id
        a_row, a_col = placement.anchor
        rows[a_row][a_col] = Glyph(_ANCHOR_CHAR, StyleTag.ANCHOR, fid)

        c_row, c_col = placement.connector
        dr = c_row - a_row
        direction = c_col - a_col
        rows[c_row][c_col] = Glyph(_CONNECTORS[(dr, direction)], StyleTag.CONNECTOR, fid)

        t_row, col = placement.origin
        for ch in placement.text:
            rows[t_row][col] = Glyph(ch, StyleTag.LABEL, fid)
            if cell_width(ch) == 2:
                rows[t_row][col + 1] = Glyph("", StyleTag.LABEL, fid)
                col += 2
            else:
                col += 1
    return grid.replace_rows(rows)
