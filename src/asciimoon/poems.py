"""Moon poems: the plain-text file format, directory loading with bundled fallbacks, and panel text."""

import logging
import random
import re
import textwrap
import unicodedata
from pathlib import Path

from asciimoon.errors import PoemLoadWarning
from asciimoon.i18n import LANGUAGES, language_code, t
from asciimoon.models import Poem, PoemLibrary, StyleTag
from asciimoon.renderers.labels import cell_width

logger = logging.getLogger(__name__)

BUNDLED_POEMS_DIR = Path(__file__).parent / "data" / "poems"
DEFAULT_POEMS_DIR = Path("poems")

_SEPARATOR = "---"
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _clean(line: str) -> str:
    """Normalize a line and drop control characters (no escape sequences reach the terminal)."""
    line = unicodedata.normalize("NFC", line.rstrip("\r"))
    return _CONTROL_CHARS.sub("", line)


def parse_poem_text(text: str, poem_id: str, language: str) -> Poem:
    """Parse the plain-text poem format.

    Line 1 is the title, line 2 the author, an optional line 3 is the literal
    separator ``---``, and the remaining lines are the body. Blank lines inside
    the body are kept; trailing blank lines are dropped.

    Raises:
        PoemLoadWarning: If the title or body is empty.
    """
    lines = [_clean(line) for line in text.splitlines()]
    title = lines[0].strip() if lines else ""
    author = lines[1].strip() if len(lines) > 1 else ""
    body = lines[2:]
    if body and body[0].strip() == _SEPARATOR:
        body = body[1:]
    while body and not body[-1].strip():
        body.pop()

    if not title or not body:
        raise PoemLoadWarning(f"Malformed poem {poem_id!r}: missing title or body")

    return Poem(
        id=poem_id,
        title=title,
        author=author,
        body=tuple(body),
        language=language,
    )


def _load_language_dir(directory: Path, language: str) -> tuple[Poem, ...]:
    poems: list[Poem] = []
    for path in sorted(directory.glob("*.txt")):
        poem_id = f"{language}/{path.stem}"
        try:
            text = path.read_text(encoding="utf-8")
            poems.append(parse_poem_text(text, poem_id, language))
        except (OSError, UnicodeDecodeError, PoemLoadWarning) as exc:
            logger.warning("Skipping poem %s: %s", path, exc)
    return tuple(poems)


def load_poems_from_dir(base_dir: Path) -> PoemLibrary:
    """Read ``<base_dir>/<lang>/*.txt`` for every supported language."""
    by_language: dict[str, tuple[Poem, ...]] = {}
    if not base_dir.is_dir():
        logger.debug("Poem directory %s not found", base_dir)
        return PoemLibrary(by_language=by_language)
    for code, _ in LANGUAGES:
        directory = base_dir / code
        if not directory.is_dir():
            continue
        poems = _load_language_dir(directory, code)
        if poems:
            by_language[code] = poems
    return PoemLibrary(by_language=by_language)


def load_poems(poems_dir: Path | None = None) -> PoemLibrary:
    """Load poems from disk and fill gaps with the bundled defaults.

    If `poems_dir` is None, ``./poems`` is tried. A language with at least one
    valid poem on disk uses only those; other languages use the bundled poems.

    Args:
        poems_dir: Directory containing one subdirectory per language code.

    Returns:
        PoemLibrary covering every language that has any poem.
    """
    if poems_dir is not None and not poems_dir.is_dir():
        logger.warning("Poem directory %s does not exist; using bundled poems", poems_dir)
    custom = load_poems_from_dir(poems_dir or DEFAULT_POEMS_DIR)
    bundled = load_poems_from_dir(BUNDLED_POEMS_DIR)

    merged: dict[str, tuple[Poem, ...]] = {}
    for code, _ in LANGUAGES:
        poems = custom.for_language(code) or bundled.for_language(code)
        if poems:
            merged[code] = poems
    logger.debug(
        "Loaded poems: %s", {code: len(poems) for code, poems in merged.items()}
    )
    return PoemLibrary(by_language=merged)


def pick(
    poems: PoemLibrary,
    language: str,
    exclude_id: str | None = None,
    rng: random.Random | None = None,
) -> Poem | None:
    """Pick a random poem for a language.

    The poem with `exclude_id` is skipped whenever another candidate exists,
    so re-rolling always changes the poem unless only one is loaded.

    Returns:
        A Poem, or None when no poem is loaded for the language.
    """
    candidates = poems.for_language(language)
    if not candidates:
        return None
    if exclude_id is not None and len(candidates) > 1:
        candidates = tuple(p for p in candidates if p.id != exclude_id) or candidates
    return (rng or random).choice(candidates)


def _wrap(line: str, width: int) -> list[str]:
    if width <= 0:
        return [line]
    if cell_width(line) <= width:
        return [line]
    if cell_width(line) == len(line):
        return textwrap.wrap(line, width) or [""]
    # Wide characters: break on cell count
    chunks: list[str] = []
    current = ""
    for ch in line:
        if cell_width(current + ch) > width:
            chunks.append(current)
            current = ch
        else:
            current += ch
    chunks.append(current)
    return chunks


def panel_lines(
    poem: Poem | None,
    width: int,
    language_index: int,
    revealed: int | None = None,
) -> list[tuple[str, StyleTag]]:
    """Text lines of the poem panel with their styles.

    Args:
        poem: Poem to show, or None for the placeholder.
        width: Usable panel width in cells.
        language_index: Language of the placeholder text.
        revealed: Number of body lines shown so far (None = all).

    Returns:
        (text, style) pairs, one per terminal row.
    """
    if poem is None:
        return [(t("no_poems", language_code(language_index)), StyleTag.POEM_ACCENT)]

    out: list[tuple[str, StyleTag]] = []
    for chunk in _wrap(poem.title, width):
        out.append((chunk, StyleTag.POEM_TITLE))
    out.append((f"— {poem.author}" if poem.author else "", StyleTag.POEM_ACCENT))
    out.append(("", StyleTag.BLANK))

    shown = len(poem.body) if revealed is None else max(0, revealed)
    for i, line in enumerate(poem.body):
        if i >= shown:
            out.append(("", StyleTag.BLANK))
            continue
        for chunk in _wrap(line, width):
            out.append((chunk, StyleTag.POEM_BODY))
    return out
