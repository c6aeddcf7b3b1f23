# storygame/logic/extractor.py

"""Candidate extraction from tagged tokens."""

import logging
from typing import Iterable, List, Optional, Set, Tuple

from storygame.core.definitions import PartOfSpeech, Tense, WordClass
from storygame.core.domain import TaggedToken, Token

logger = logging.getLogger(__name__)


def categorize(tagged: TaggedToken, include_adverbs: bool = False) -> Optional[Token]:
    """Maps one tagged token to a candidate, or None if it is not eligible.

    Args:
        tagged: Token reported by a tagger adapter
        include_adverbs: Whether adverbs are eligible

    Returns:
        Candidate Token, None for excluded word classes
    """
    word_class = tagged.word_class

    if word_class == WordClass.NOUN:
        return Token(tagged.text, tagged.offset, PartOfSpeech.NOUN)
    if word_class == WordClass.ADJECTIVE:
        return Token(tagged.text, tagged.offset, PartOfSpeech.ADJECTIVE)
    if word_class == WordClass.ADVERB:
        if not include_adverbs:
            return None
        return Token(tagged.text, tagged.offset, PartOfSpeech.ADVERB)
    if word_class == WordClass.VERB:
        return Token(
            tagged.text, tagged.offset, PartOfSpeech.VERB, tagged.tense or Tense.PRESENT
        )
    return None


def extract(
    tagged_tokens: Iterable[TaggedToken],
    include_adverbs: bool = False,
    source_text: Optional[str] = None,
) -> List[Token]:
    """Builds the candidate set for one text.

    Args:
        tagged_tokens: Output of a tagger adapter
        include_adverbs: Whether adverbs are eligible
        source_text: When given, every candidate is checked against it

    Returns:
        Candidates ordered by offset, exact (offset, text) duplicates collapsed
    """
    seen: Set[Tuple[int, str]] = set()
    candidates: List[Token] = []

    for tagged in tagged_tokens:
        token = categorize(tagged, include_adverbs)
        if token is None:
            continue

        if source_text is not None and (
            source_text[token.offset : token.end] != token.text
        ):
            logger.warning(
                "Dropping candidate whose offset does not match the text",
                extra={"token": token.text, "offset": token.offset},
            )
            continue

        key = (token.offset, token.text)
        if key in seen:
            continue
        seen.add(key)
        candidates.append(token)

    candidates.sort(key=lambda t: t.offset)

    logger.debug(
        "Extracted candidates",
        extra={
            "candidate_count": len(candidates),
            "categories": sorted({t.part_of_speech for t in candidates}),
        },
    )
    return candidates
