"""Immutable data model passed between the compute, state, and render layers."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

SYNODIC_MONTH = 29.530588853  # Mean new moon to new moon (days)

_PHASE_NAMES: tuple[str, ...] = (
    "new_moon",
    "waxing_crescent",
    "first_quarter",
    "waxing_gibbous",
    "full_moon",
    "waning_gibbous",
    "last_quarter",
    "waning_crescent",
)


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


class Mode(str, Enum):
    NOW = "now"
    MANUAL = "manual"


class StyleTag(str, Enum):
    """Foreground style of a single cell. Mapped to colors per theme."""

    BLANK = "blank"
    LIT = "lit"
    UNLIT = "unlit"
    LABEL = "label"
    ANCHOR = "anchor"
    CONNECTOR = "connector"
    POEM_TITLE = "poem_title"
    POEM_BODY = "poem_body"
    POEM_ACCENT = "poem_accent"


class Category(str, Enum):
    MARE = "mare"
    CRATER = "crater"
    OTHER = "other"


@dataclass(frozen=True)
class PhaseResult:
    """Phase of the Moon at a single instant."""

    fraction: float  # 0 = new, 0.5 = full, in [0, 1)
    illuminated_percent: float  # Illuminated share of the visible disc, 0..100
    waxing: bool

    @property
    def age_days(self) -> float:
        """Days since the last (mean) new moon."""
        return self.fraction * SYNODIC_MONTH

    @property
    def name(self) -> str:
        """Phase name key ("new_moon", "waxing_crescent", ...) for i18n lookup."""
        return _PHASE_NAMES[round(self.fraction * 8) % 8]


@dataclass(frozen=True)
class RenderOptions:
    """Everything the disc renderer needs besides the phase."""

    height_rows: int
    hide_dark: bool = False
    theme: Theme = Theme.DARK  # Must already be resolved (light or dark)
    show_labels: bool = False
    language_index: int = 0


@dataclass(frozen=True)
class Glyph:
    """A single terminal cell."""

    char: str  # "" for the trailing half of a double-width character
    style: StyleTag = StyleTag.BLANK
    anchor: str | None = None  # Feature id when the cell belongs to a label


BLANK = Glyph(" ")


@dataclass(frozen=True)
class DiscGrid:
    """Rows of glyphs making up one rendered frame of the moon."""

    rows: tuple[tuple[Glyph, ...], ...]
    disc_left: int = 0  # Column where the disc's bounding box starts
    disc_columns: int = 0  # Width of the disc's bounding box (0 = full grid)

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def disc_width(self) -> int:
        return self.disc_columns or self.width

    def glyph(self, row: int, col: int) -> Glyph:
        return self.rows[row][col]

    def text(self) -> str:
        """Plain characters, one line per row, styles dropped."""
        return "\n".join("".join(g.char for g in row) for row in self.rows)

    def count(self, style: StyleTag) -> int:
        return sum(1 for row in self.rows for g in row if g.style is style)

    def pad(self, left: int, right: int) -> "DiscGrid":
        """Return a copy with blank columns added on both sides."""
        return DiscGrid(
            rows=tuple((BLANK,) * left + row + (BLANK,) * right for row in self.rows),
            disc_left=self.disc_left + left,
            disc_columns=self.disc_width,
        )

    def replace_rows(self, rows) -> "DiscGrid":
        return replace(self, rows=tuple(tuple(row) for row in rows))

    def mirrored(self) -> "DiscGrid":
        """Return a left-right mirror image (single-width glyphs only)."""
        return DiscGrid(
            rows=tuple(tuple(reversed(row)) for row in self.rows),
            disc_left=self.width - self.disc_left - self.disc_width,
            disc_columns=self.disc_width,
        )


@dataclass(frozen=True)
class Feature:
    """A named lunar feature projected onto the unit disc."""

    id: str  # Stable identifier ("mare_imbrium")
    x: float  # Orthographic projection, -1 (west/left) .. 1 (east/right)
    y: float  # Orthographic projection, -1 (south/down) .. 1 (north/up)
    category: Category
    priority: int  # Lower wins when labels collide


@dataclass(frozen=True)
class LabelEntry:
    """Localized text for a single feature."""

    feature_id: str
    text: str
    language: str  # Language code ("en", "zh", ...)


@dataclass(frozen=True)
class LabelPlacement:
    """Where one label ended up on the grid."""

    feature_id: str
    text: str
    anchor: tuple[int, int]  # (row, col)
    connector: tuple[int, int]  # (row, col)
    origin: tuple[int, int]  # (row, col) of the first text cell
    text_width: int  # Width in terminal cells

    def cells(self) -> frozenset[tuple[int, int]]:
        """All cells occupied by this label: anchor, connector, and text."""
        row, col = self.origin
        text_cells = {(row, col + i) for i in range(self.text_width)}
        return frozenset({self.anchor, self.connector} | text_cells)


@dataclass(frozen=True)
class Poem:
    """A short poem shown in the side panel."""

    id: str  # "<language>/<file stem>" ("en/the_moon_stevenson")
    title: str
    author: str
    body: tuple[str, ...]
    language: str  # Language code ("en", "zh", ...)


@dataclass(frozen=True)
class InteractionState:
    """Snapshot of the interactive view. Replaced, never mutated."""

    current: datetime  # UTC instant used for the phase computation
    mode: Mode = Mode.NOW
    labels_on: bool = False
    language_index: int = 0
    hide_dark: bool = False
    poem_panel_on: bool = False
    info_panel_on: bool = True
    current_poem_id: str | None = None
    running: bool = True

    @property
    def current_date(self):
        return self.current.date()

    def evolve(self, **changes) -> "InteractionState":
        return replace(self, **changes)


@dataclass(frozen=True)
class PoemLibrary:
    """Poems keyed by language code."""

    by_language: dict[str, tuple[Poem, ...]] = field(default_factory=dict)

    def for_language(self, language: str) -> tuple[Poem, ...]:
        return self.by_language.get(language, ())

    def find(self, poem_id: str | None) -> Poem | None:
        if poem_id is None:
            return None
        for poems in self.by_language.values():
            for poem in poems:
                if poem.id == poem_id:
                    return poem
        return None
