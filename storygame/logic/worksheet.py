# storygame/logic/worksheet.py

"""Plain-text documents handed to download and share actions."""

import re
from typing import List

from storygame.core.domain import Blank

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def export_filename(title: str, extension: str = "txt") -> str:
    """Builds a download file name from a title.

    "The Space Adventure" becomes "the-space-adventure.txt".
    """
    slug = _SLUG_SEPARATORS.sub("-", (title or "").lower()).strip("-")
    return f"{slug or 'silly-word-story'}.{extension}"


def render_worksheet(title: str, blanks: List[Blank], template: str, line_width: int = 20) -> str:
    """Printable fill-in-the-blank sheet: numbered word list, then the template.

    Args:
        title: Story title
        blanks: Blanks in display order
        template: Template text with numbered placeholders
        line_width: Length of the writing line after each word type
    """
    lines = [title, "=" * len(title), "", "Words Needed:"]
    for blank in sorted(blanks, key=lambda b: b.display_index):
        lines.append(f"{blank.display_index}) {blank.label} {'_' * line_width}")
    lines.extend(["", "Your Story:", template, ""])
    return "\n".join(lines)


def render_story_document(title: str, story: str) -> str:
    """Finished story with its title, ready to save or share."""
    return "\n".join([title, "=" * len(title), "", story, ""])
