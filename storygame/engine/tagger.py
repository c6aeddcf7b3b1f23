# storygame/engine/tagger.py

"""Tagger adapter interface with offset alignment and word filtering."""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional

from storygame.core.domain import TaggedToken
from storygame.core.exceptions import InitializationError, TaggerError

logger = logging.getLogger(__name__)


@dataclass
class RawToken:
    """A token as reported by the underlying tagger.

    offset is None when the tagger does not expose source positions.
    """

    text: str
    word_class: str
    offset: Optional[int] = None
    tense: Optional[str] = None
    tags: tuple = ()


class Tagger(ABC):
    """Base class for tagger adapters.

    Subclasses only report tokens and their word classes; this class anchors
    every token to its exact position in the source text and drops tokens
    that are too short or pure punctuation.
    """

    NON_WORD = re.compile(r"[\W_]+")

    def __init__(self, min_word_length: int = 2):
        self.min_word_length = min_word_length

    @abstractmethod
    def _analyze(self, text: str) -> Iterable[RawToken]:
        """Runs the underlying tagger over the whole text.

        Args:
            text: Source text

        Returns:
            Tokens in reading order
        """
        pass

    def tag(self, text: str) -> List[TaggedToken]:
        """Tags text and returns offset-anchored word tokens.

        Args:
            text: Source text

        Returns:
            Tagged tokens in offset order

        Raises:
            TaggerError: If the tagger fails on the input as a whole.
        """
        if not text:
            return []

        try:
            raw_tokens = list(self._analyze(text))
        except (TaggerError, InitializationError):
            raise
        except Exception as e:
            logger.error(
                "Tagger failed to analyze text",
                exc_info=True,
                extra={"text_length": len(text), "tagger": type(self).__name__},
            )
            raise TaggerError(f"Tagger could not analyze text: {e}") from e

        cursor = 0
        tokens: List[TaggedToken] = []

        for raw in raw_tokens:
            try:
                offset = self._locate(text, raw, cursor)
                if offset is None:
                    logger.warning(
                        "Skipping token not found in source text",
                        extra={"token": raw.text, "cursor": cursor},
                    )
                    continue

                # The cursor never moves backwards
                cursor = max(cursor, offset + len(raw.text))

                if not self.is_word(raw.text):
                    continue

                token = TaggedToken(
                    text=raw.text,
                    offset=offset,
                    word_class=raw.word_class,
                    tense=raw.tense,
                    tags=tuple(raw.tags),
                )
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(
                    "Skipping malformed token",
                    extra={"token": repr(raw), "error": str(e)},
                )
                continue

            tokens.append(token)

        logger.debug(
            "Tagged text",
            extra={"raw_count": len(raw_tokens), "word_count": len(tokens)},
        )
        return tokens

    def is_word(self, text: str) -> bool:
        """True when text has enough word characters to be a candidate."""
        return len(self.NON_WORD.sub("", text)) >= self.min_word_length

    @staticmethod
    def _locate(text: str, raw: RawToken, cursor: int) -> Optional[int]:
        """Finds where a raw token starts in the source text.

        A native offset is trusted only when the text at that offset matches.
        Otherwise the token is searched for from the cursor onwards, so a
        repeated word is anchored to its next occurrence, not its first.
        """
        if not isinstance(raw.text, str) or not raw.text:
            raise ValueError("token text must be a non-empty string")

        if raw.offset is not None:
            if raw.offset < 0:
                raise ValueError(f"negative offset {raw.offset}")
            if text[raw.offset : raw.offset + len(raw.text)] == raw.text:
                return raw.offset
            logger.debug(
                "Native offset does not match text, realigning",
                extra={"token": raw.text, "offset": raw.offset},
            )

        position = text.find(raw.text, cursor)
        return position if position != -1 else None
