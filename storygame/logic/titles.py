# storygame/logic/titles.py

"""Display title heuristic based on keyword clusters."""

import logging
import random
from typing import Optional

from storygame.core.loader import VocabularyLoader

logger = logging.getLogger(__name__)


def title_for(text: str, rng: Optional[random.Random] = None) -> str:
    """Derives a display title from the story text.

    Keyword clusters are checked in the order they are declared in the
    vocabulary; the first cluster with a keyword in the text gives the title.
    Without a match a generic title is picked at random.

    Args:
        text: Story text
        rng: Random source for the generic pick

    Returns:
        Non-empty title
    """
    loader = VocabularyLoader.get_instance()
    lower_text = (text or "").lower()

    for cluster in loader.get_title_clusters():
        if any(keyword in lower_text for keyword in cluster.get("keywords", [])):
            logger.debug("Title matched keyword cluster", extra={"cluster": cluster.get("name")})
            return cluster["title"]

    return (rng or random).choice(loader.get_generic_titles())
