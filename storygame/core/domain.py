# storygame/core/domain.py

"""Domain models for story analysis and game results."""

import time
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional


@dataclass(frozen=True)
class TaggedToken:
    """A word reported by a tagger adapter, anchored in the source text.

    Attributes:
        text: Exact substring of the source text
        offset: Starting character position in the source text
        word_class: One of the WordClass constants
        tense: Tense constant for verbs, None when the tagger found no signal
        tags: Raw tagger labels kept for debugging
    """

    text: str
    offset: int
    word_class: str
    tense: Optional[str] = None
    tags: tuple = ()

    @property
    def end(self) -> int:
        return self.offset + len(self.text)


@dataclass(frozen=True)
class Token:
    """A candidate word eligible for replacement.

    Attributes:
        text: Exact substring of the original text
        offset: Starting character position in the original text
        part_of_speech: One of the PartOfSpeech constants
        tense: Tense constant for verbs, None otherwise
    """

    text: str
    offset: int
    part_of_speech: str
    tense: Optional[str] = None

    @property
    def id(self) -> str:
        return f"{self.part_of_speech}-{self.offset}"

    @property
    def end(self) -> int:
        return self.offset + len(self.text)


@dataclass(frozen=True)
class Blank:
    """A candidate chosen to be replaced.

    The id is stable across re-sorting; display_index is only used for
    numbering shown to people (template blanks, prompts).
    """

    token: Token
    display_index: int

    @property
    def id(self) -> str:
        return self.token.id

    @property
    def text(self) -> str:
        return self.token.text

    @property
    def offset(self) -> int:
        return self.token.offset

    @property
    def part_of_speech(self) -> str:
        return self.token.part_of_speech

    @property
    def tense(self) -> Optional[str]:
        return self.token.tense

    @property
    def label(self) -> str:
        """Human-facing word type, e.g. 'verb (past)'."""
        if self.token.tense:
            return f"{self.part_of_speech} ({self.token.tense})"
        return self.part_of_speech


@dataclass
class AnalysisResult:
    """Result object returned by the analysis service.

    Attributes:
        original_text: Text that was analyzed
        candidates: Every word eligible for replacement, ordered by offset
        blanks: Words selected as blanks, ordered by offset
        title: Display title derived from the text
        metadata: Processing information; carries 'error' on failure
    """

    original_text: str
    candidates: List[Token] = field(default_factory=list)
    blanks: List[Blank] = field(default_factory=list)
    title: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return "error" in self.metadata


@dataclass
class ChatMessage:
    """One bubble of the conversational mode."""

    sender: str
    text: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class FlowOutcome:
    """What a game action produced, in terms the UI can show.

    Attributes:
        success: False when the action was rejected or failed
        message: User-facing explanation
        output: Story or template text when the action produced one
    """

    success: bool
    message: str = ""
    output: str = ""
