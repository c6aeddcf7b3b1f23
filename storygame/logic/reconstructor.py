# storygame/logic/reconstructor.py

"""Rebuilds text from the original story, its blanks, and a fill function.

Every output shape (finished story, highlighted story, numbered template)
goes through reconstruct(), which copies the original text forward with a
single cursor and splices fills in at each blank's offset. Blanks are placed
by offset, never by searching for their text.
"""

import logging
import re
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from storygame.core.domain import Blank

logger = logging.getLogger(__name__)

FillFn = Callable[[Blank], Optional[str]]

DEFAULT_MARKER = "**"


def reconstruct(
    original_text: str,
    blanks: List[Blank],
    fill_fn: FillFn,
    escape: Optional[Callable[[str], str]] = None,
) -> str:
    """Rebuilds original_text with fills spliced in at each blank.

    Args:
        original_text: Text the blanks were taken from
        blanks: Blanks in any order
        fill_fn: Returns the text for a blank, or None to keep the original
        escape: Applied to all original text copied through, kept blank
            words included

    Returns:
        Rebuilt text. Blanks overlapping an earlier blank are skipped.
    """
    escape = escape or (lambda s: s)
    parts: List[str] = []
    cursor = 0

    for blank in sorted(blanks, key=lambda b: b.offset):
        if blank.offset < cursor:
            logger.warning(
                "Skipping blank that overlaps a previous one",
                extra={"blank_id": blank.id, "offset": blank.offset, "cursor": cursor},
            )
            continue

        parts.append(escape(original_text[cursor : blank.offset]))
        fill = fill_fn(blank)
        parts.append(escape(blank.text) if fill is None else fill)
        cursor = blank.offset + len(blank.text)

    parts.append(escape(original_text[cursor:]))
    return "".join(parts)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def story_fill(replacements: Dict[str, str]) -> FillFn:
    """Fills each blank with its trimmed replacement; missing ones keep the original."""

    def fill(blank: Blank) -> Optional[str]:
        return _clean(replacements.get(blank.id))

    return fill


def escape_marker(text: str, marker: str = DEFAULT_MARKER) -> str:
    r"""Backslash-escapes marker characters and backslashes in text.

    With the default marker, "2**3" becomes "2\*\*3", which Markdown
    shows as "2**3".
    """
    special = set(marker) | {"\\"}
    return "".join("\\" + ch if ch in special else ch for ch in text)


def highlight_fill(replacements: Dict[str, str], marker: str = DEFAULT_MARKER) -> FillFn:
    """Like story_fill, but wraps each escaped replacement in marker."""

    def fill(blank: Blank) -> Optional[str]:
        value = _clean(replacements.get(blank.id))
        if value is None:
            return None
        return f"{marker}{escape_marker(value, marker)}{marker}"

    return fill


def template_fill(width: int = 5) -> FillFn:
    """Fills every blank with its numbered placeholder, e.g. _____1_____."""
    pad = "_" * width

    def fill(blank: Blank) -> Optional[str]:
        return f"{pad}{blank.display_index}{pad}"

    return fill


def render_story(original_text: str, blanks: List[Blank], replacements: Dict[str, str]) -> str:
    return reconstruct(original_text, blanks, story_fill(replacements))


def render_highlighted(
    original_text: str,
    blanks: List[Blank],
    replacements: Dict[str, str],
    marker: str = DEFAULT_MARKER,
) -> str:
    return reconstruct(
        original_text,
        blanks,
        highlight_fill(replacements, marker),
        escape=lambda s: escape_marker(s, marker),
    )


def render_template(original_text: str, blanks: List[Blank], width: int = 5) -> str:
    return reconstruct(original_text, blanks, template_fill(width))


def split_highlighted(text: str, marker: str = DEFAULT_MARKER) -> Iterator[Tuple[str, bool]]:
    """Splits highlighted text into (segment, is_highlight) pairs.

    Escaped characters come back unescaped. An unclosed marker is kept as
    plain text. Empty segments are not yielded.
    """
    pattern = re.compile(r"\\.|" + re.escape(marker), re.DOTALL)
    buffer: List[str] = []
    highlight = False
    cursor = 0

    for match in pattern.finditer(text):
        buffer.append(text[cursor : match.start()])
        cursor = match.end()
        if match.group() != marker:
            buffer.append(match.group()[1])
            continue

        segment = "".join(buffer)
        buffer = []
        if segment:
            yield segment, highlight
        highlight = not highlight

    buffer.append(text[cursor:])
    rest = "".join(buffer)
    if highlight:
        rest = marker + rest
    if rest:
        yield rest, False


def strip_highlights(text: str, marker: str = DEFAULT_MARKER) -> str:
    """Removes highlight markers and escapes, returning the plain story."""
    return "".join(segment for segment, _ in split_highlighted(text, marker))
