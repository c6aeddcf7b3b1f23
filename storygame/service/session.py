# storygame/service/session.py

"""Game session state machine.

A session moves through setup -> playing -> completed (direct fill),
setup -> completed (template), or setup -> chatting -> completed
(conversation). reset() returns to setup from any phase. Actions called in
the wrong phase are rejected with a failed FlowOutcome rather than raising.
"""

import functools
import logging
import random
from typing import Callable, Dict, List, Optional, Tuple

from storygame.core.definitions import GameMode, GamePhase
from storygame.core.domain import AnalysisResult, Blank, ChatMessage, FlowOutcome
from storygame.core.exceptions import (
    IncompleteReplacementsError,
    InvalidTransitionError,
)
from storygame.core.loader import VocabularyLoader
from storygame.logic.reconstructor import (
    render_highlighted,
    render_story,
    render_template,
)
from storygame.service.config import Settings, settings
from storygame.service.pipeline import analyze_story

logger = logging.getLogger(__name__)

Analyzer = Callable[[str], AnalysisResult]

BOT = "bot"
USER = "user"


def _article(label: str) -> str:
    return "an" if label[:1].lower() in "aeiou" else "a"


def _guarded(method):
    """Turns rejected transitions into failed outcomes."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs) -> FlowOutcome:
        try:
            return method(self, *args, **kwargs)
        except InvalidTransitionError as e:
            logger.warning(
                "Rejected game action",
                extra={"action": method.__name__, "phase": self.phase, "reason": str(e)},
            )
            return FlowOutcome(success=False, message=self._prompt("wrong_phase"))

    return wrapper


class GameSession:
    """One player's game, independent of any UI framework."""

    def __init__(
        self,
        mode: str = GameMode.DIRECT_FILL,
        app_settings: Optional[Settings] = None,
        analyzer: Optional[Analyzer] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize a session in the setup phase.

        Args:
            mode: One of the GameMode constants
            app_settings: Settings to use, defaults to the global settings
            analyzer: Callable turning text into an AnalysisResult
            rng: Random source for selection and titles
        """
        if mode not in (GameMode.DIRECT_FILL, GameMode.TEMPLATE, GameMode.CONVERSATION):
            raise ValueError(f"Unknown game mode: {mode}")

        self.mode = mode
        self.settings = app_settings or settings
        self._rng = rng
        self._analyzer = analyzer or self._default_analyzer
        self._loader = VocabularyLoader.get_instance()
        self._clear()

    def _default_analyzer(self, text: str) -> AnalysisResult:
        return analyze_story(text, app_settings=self.settings, rng=self._rng)

    def _clear(self) -> None:
        self.phase = GamePhase.SETUP
        self.original_text = ""
        self.title = ""
        self._blanks: List[Blank] = []
        self._replacements: Dict[str, str] = {}
        self._messages: List[ChatMessage] = []
        self.current_blank_index = 0
        self.output = ""

    # Read-only views

    @property
    def blanks(self) -> Tuple[Blank, ...]:
        return tuple(self._blanks)

    @property
    def replacements(self) -> Dict[str, str]:
        return dict(self._replacements)

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def current_blank(self) -> Optional[Blank]:
        if self.phase != GamePhase.CHATTING:
            return None
        if self.current_blank_index >= len(self._blanks):
            return None
        return self._blanks[self.current_blank_index]

    @property
    def missing_ids(self) -> List[str]:
        """Ids of blanks without a non-blank replacement."""
        return [
            b.id for b in self._blanks if not self._replacements.get(b.id, "").strip()
        ]

    def require_complete(self) -> None:
        """Raises IncompleteReplacementsError if any blank is still empty."""
        missing = self.missing_ids
        if missing:
            raise IncompleteReplacementsError(missing)

    @property
    def story_text(self) -> str:
        return render_story(self.original_text, self._blanks, self._replacements)

    @property
    def highlighted_text(self) -> str:
        return render_highlighted(
            self.original_text,
            self._blanks,
            self._replacements,
            self.settings.highlight_marker,
        )

    @property
    def template_text(self) -> str:
        return render_template(
            self.original_text, self._blanks, self.settings.placeholder_width
        )

    def hint_for(self, blank: Blank) -> str:
        """Short explanation of the word type a blank asks for."""
        return self._loader.get_word_type_hint(
            blank.tense or blank.part_of_speech
        ) or self._loader.get_word_type_hint(blank.part_of_speech)

    # Transitions

    def _require(self, *phases: str, mode: Optional[str] = None) -> None:
        if self.phase not in phases:
            raise InvalidTransitionError(
                f"Action needs phase {phases}, session is in '{self.phase}'"
            )
        if mode is not None and self.mode != mode:
            raise InvalidTransitionError(
                f"Action needs mode '{mode}', session is in '{self.mode}'"
            )

    def _prompt(self, key: str, **values) -> str:
        return self._loader.get_prompt(key, **values)

    def _load(self, text: str) -> Optional[FlowOutcome]:
        """Analyzes text into the session. Returns a failed outcome on error."""
        result = self._analyzer(text)
        if result.failed:
            logger.warning(
                "Analysis failed, staying in setup",
                extra={"error": result.metadata.get("error"), "mode": self.mode},
            )
            return FlowOutcome(success=False, message=self._prompt("analysis_failed"))

        self.original_text = result.original_text
        self.title = result.title
        self._blanks = sorted(result.blanks, key=lambda b: b.offset)
        self._replacements = {}
        self.current_blank_index = 0
        return None

    @_guarded
    def set_mode(self, mode: str) -> FlowOutcome:
        """Switches the game mode; only allowed during setup."""
        self._require(GamePhase.SETUP)
        if mode not in (GameMode.DIRECT_FILL, GameMode.TEMPLATE, GameMode.CONVERSATION):
            return FlowOutcome(success=False, message=f"Unknown game mode: {mode}")
        self.mode = mode
        return FlowOutcome(success=True)

    @_guarded
    def analyze(self, text: str) -> FlowOutcome:
        """Direct fill: finds the blanks and moves to playing."""
        self._require(GamePhase.SETUP, mode=GameMode.DIRECT_FILL)

        failure = self._load(text)
        if failure is not None:
            return failure

        self.phase = GamePhase.PLAYING
        logger.info("Game started", extra={"mode": self.mode, "blank_count": len(self._blanks)})

        if not self._blanks:
            return FlowOutcome(success=True, message=self._prompt("no_words"))
        return FlowOutcome(success=True)

    @_guarded
    def build_template(self, text: str) -> FlowOutcome:
        """Template mode: finds the blanks and renders the numbered template."""
        self._require(GamePhase.SETUP, mode=GameMode.TEMPLATE)

        failure = self._load(text)
        if failure is not None:
            return failure

        self.output = self.template_text
        self.phase = GamePhase.COMPLETED
        logger.info("Template built", extra={"blank_count": len(self._blanks)})

        message = "" if self._blanks else self._prompt("no_words")
        return FlowOutcome(success=True, message=message, output=self.output)

    @_guarded
    def start_conversation(self, text: str) -> FlowOutcome:
        """Conversation mode: finds the blanks and asks for the first word."""
        self._require(GamePhase.SETUP, mode=GameMode.CONVERSATION)

        failure = self._load(text)
        if failure is not None:
            return failure

        self._messages = []
        if not self._blanks:
            self._say(self._prompt("no_words"))
            self.output = self.story_text
            self.phase = GamePhase.COMPLETED
            return FlowOutcome(
                success=True, message=self._prompt("no_words"), output=self.output
            )

        self.phase = GamePhase.CHATTING
        self._say(self._prompt("welcome"))
        question = self._question("first_question", self._blanks[0])
        self._say(question)
        logger.info("Conversation started", extra={"blank_count": len(self._blanks)})
        return FlowOutcome(success=True, message=question)

    @_guarded
    def set_replacement(self, blank_id: str, value: str) -> FlowOutcome:
        """Direct fill: records a word for one blank, in any order."""
        self._require(GamePhase.PLAYING)

        if blank_id not in {b.id for b in self._blanks}:
            return FlowOutcome(success=False, message=f"Unknown blank '{blank_id}'")

        self._replacements[blank_id] = value or ""
        return FlowOutcome(success=True)

    @_guarded
    def submit_answer(self, answer: str) -> FlowOutcome:
        """Conversation mode: records the word for the current blank."""
        self._require(GamePhase.CHATTING)

        word = (answer or "").strip()
        if not word:
            return FlowOutcome(success=False, message=self._prompt("empty_answer"))

        blank = self._blanks[self.current_blank_index]
        self._messages.append(ChatMessage(sender=USER, text=word))
        self._replacements[blank.id] = word
        self.current_blank_index += 1

        if self.current_blank_index < len(self._blanks):
            question = self._question(
                "next_question", self._blanks[self.current_blank_index]
            )
            self._say(question)
            return FlowOutcome(success=True, message=question)

        self._say(self._prompt("all_collected"))
        self.output = self.story_text
        self.phase = GamePhase.COMPLETED
        self._say(self._prompt("finished"))
        logger.info("Conversation completed", extra={"blank_count": len(self._blanks)})
        return FlowOutcome(
            success=True, message=self._prompt("finished"), output=self.output
        )

    @_guarded
    def generate(self) -> FlowOutcome:
        """Direct fill: renders the finished story.

        Every blank needs a word unless partial fills are allowed, in which
        case empty blanks keep their original word.
        """
        self._require(GamePhase.PLAYING)

        if not self.settings.allow_partial_fill:
            try:
                self.require_complete()
            except IncompleteReplacementsError as e:
                logger.info(
                    "Generate rejected, blanks still empty",
                    extra={"missing_count": len(e.missing_ids)},
                )
                return FlowOutcome(success=False, message=self._prompt("missing_words"))

        self.output = self.story_text
        self.phase = GamePhase.COMPLETED
        logger.info(
            "Story generated",
            extra={"blank_count": len(self._blanks), "filled_count": len(self._blanks) - len(self.missing_ids)},
        )
        return FlowOutcome(success=True, output=self.output)

    def reset(self) -> FlowOutcome:
        """Returns to setup from any phase, forgetting the current story."""
        logger.info("Game reset", extra={"from_phase": self.phase})
        self._clear()
        return FlowOutcome(success=True)

    # Conversation helpers

    def _say(self, text: str) -> None:
        self._messages.append(ChatMessage(sender=BOT, text=text))

    def _question(self, key: str, blank: Blank) -> str:
        return self._prompt(key, article=_article(blank.label), label=blank.label)
