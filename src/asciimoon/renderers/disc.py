"""ASCII disc renderer — phase fraction to a grid of lit/unlit glyphs.

Coordinate system:
  x ∈ [-1, 1]  (left = lunar west, right = lunar east)
  y ∈ [-1, 1]  (bottom = south, top = north; row 0 is the top row)

Cell centres use integer-symmetric numerators, (2i - (n - 1)) / n, so column j
and column n - 1 - j map to exactly opposite x values. Waxing and waning
renders of complementary fractions are therefore exact mirror images.
"""

from __future__ import annotations

import math

import numpy as np

from asciimoon.errors import SizeError
from asciimoon.features import LUNAR_FEATURES
from asciimoon.models import BLANK, DiscGrid, Glyph, PhaseResult, RenderOptions, StyleTag
from asciimoon.renderers.labels import apply_labels

MIN_HEIGHT = 3
ASPECT = 2.0  # Terminal cells are roughly twice as tall as they are wide

_LIT_RAMP = "-=+*#%@"  # Dim → bright
_UNLIT_RAMP = ".,:;"  # Sparse → dense (earthshine)

_TERMINATOR_BAND = 0.3  # Width (in u units) of the softened band next to the terminator
_EPS = 1e-12


def check_height(height_rows: int) -> None:
    """Raise SizeError if a disc of this height cannot be drawn."""
    if height_rows < MIN_HEIGHT:
        raise SizeError(
            f"Moon height must be at least {MIN_HEIGHT} lines (got {height_rows})"
        )


def disc_width(height_rows: int) -> int:
    """Grid width that keeps the disc round in typical terminal fonts."""
    return max(1, int(round(height_rows * ASPECT)))


def _axis(n: int) -> np.ndarray:
    return (2.0 * np.arange(n) - (n - 1)) / n


def _ramp_index(level: np.ndarray, ramp: str) -> np.ndarray:
    return np.clip(np.floor(level * len(ramp)), 0, len(ramp) - 1).astype(int)


def render(phase: PhaseResult, options: RenderOptions) -> DiscGrid:
    """Render the moon disc for a phase.

    The terminator is an ellipse with semi-minor axis |cos(2π·p)|, where
    p = min(fraction, 1 - fraction). Per row, with half-chord s = sqrt(1 - y²)
    and u = x / s, a cell is lit when u > cos(2π·p) while waxing and when
    -u > cos(2π·p) while waning.

    Args:
        phase: Output of compute_phase().
        options: Height, dark-hiding, and (resolved) theme.

    Returns:
        DiscGrid of height_rows rows and disc_width(height_rows) columns.

    Raises:
        SizeError: If options.height_rows is below MIN_HEIGHT.
    """
    check_height(options.height_rows)
    height = options.height_rows
    width = disc_width(height)

    x, y_down = np.meshgrid(_axis(width), _axis(height))
    y = -y_down
    r2 = x * x + y * y
    on_disc = r2 <= 1.0

    half_chord = np.sqrt(np.clip(1.0 - y * y, _EPS, None))
    u = x / half_chord
    side = u if phase.waxing else -u

    p = min(phase.fraction, 1.0 - phase.fraction)
    c = math.cos(2.0 * math.pi * p)
    if c <= -1.0 + _EPS:
        lit = on_disc.copy()
        softness = np.ones_like(x)
    elif c >= 1.0 - _EPS:
        lit = np.zeros_like(on_disc)
        softness = np.ones_like(x)
    else:
        lit = on_disc & (side > c)
        softness = np.clip((side - c) / _TERMINATOR_BAND, 0.0, 1.0)

    # Limb darkening: brightest at the centre of the disc
    z = np.sqrt(np.clip(1.0 - r2, 0.0, None))
    lit_idx = _ramp_index((0.35 + 0.65 * z) * (0.45 + 0.55 * softness), _LIT_RAMP)
    unlit_idx = _ramp_index(0.25 + 0.75 * z, _UNLIT_RAMP)

    rows: list[tuple[Glyph, ...]] = []
    for i in range(height):
        row: list[Glyph] = []
        for j in range(width):
            if not on_disc[i, j]:
                row.append(BLANK)
            elif lit[i, j]:
                row.append(Glyph(_LIT_RAMP[lit_idx[i, j]], StyleTag.LIT))
            elif options.hide_dark:
                row.append(BLANK)
            else:
                row.append(Glyph(_UNLIT_RAMP[unlit_idx[i, j]], StyleTag.UNLIT))
        rows.append(tuple(row))

    return DiscGrid(rows=tuple(rows), disc_left=0, disc_columns=width)


def render_frame(
    phase: PhaseResult, options: RenderOptions, margin: int = 0
) -> DiscGrid:
    """Disc plus optional side margins and label overlay, per RenderOptions."""
    grid = render(phase, options)
    if margin > 0:
        grid = grid.pad(margin, margin)
    if options.show_labels:
        grid = apply_labels(grid, LUNAR_FEATURES, options.language_index)
    return grid
