# storygame/service/pipeline.py

"""Main story analysis pipeline."""

import logging
import random
import threading
from typing import Dict, Optional, Tuple

from storygame.service.config import Settings, settings
from storygame.engine.spacy_driver import SpacyTagger
from storygame.engine.tagger import Tagger
from storygame.core.domain import AnalysisResult
from storygame.core.exceptions import (
    ConfigurationError,
    InitializationError,
    TaggerError,
)
from storygame.logic.extractor import extract
from storygame.logic.selector import select
from storygame.logic.titles import title_for

logger = logging.getLogger(__name__)


class TaggerService:
    """Shared spaCy taggers, one per (model, min_word_length).

    Loading a spaCy model is slow, so one pipeline per configuration is
    shared by every session in the process.
    """

    _instances: Dict[Tuple[str, int], SpacyTagger] = {}
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls, app_settings: Optional[Settings] = None) -> SpacyTagger:
        """Returns the shared tagger for the given settings with its model loaded.

        Args:
            app_settings: Settings to use, defaults to the global settings

        Raises:
            InitializationError: If the spaCy model cannot be loaded
        """
        app_settings = app_settings or settings
        key = (app_settings.spacy_model, app_settings.min_word_length)

        if key not in cls._instances:
            with cls._lock:
                # Double-checked locking pattern
                if key not in cls._instances:
                    try:
                        logger.info(
                            "Initializing tagger",
                            extra={"model": key[0], "min_word_length": key[1]},
                        )
                        tagger = SpacyTagger(model_name=key[0], min_word_length=key[1])
                        tagger.nlp
                        cls._instances[key] = tagger
                        logger.info("Tagger initialized successfully")

                    except Exception as e:
                        logger.error("Failed to initialize tagger", exc_info=True)
                        if isinstance(e, InitializationError):
                            raise
                        raise InitializationError("Tagger initialization failed") from e

        return cls._instances[key]

    @classmethod
    def reset(cls) -> None:
        """Drops the shared taggers so the next call reloads them."""
        with cls._lock:
            cls._instances = {}


def analyze_story(
    text: str,
    tagger: Optional[Tagger] = None,
    app_settings: Optional[Settings] = None,
    rng: Optional[random.Random] = None,
) -> AnalysisResult:
    """Main entry point for story analysis.

    Tags the text, extracts candidate words, selects blanks, and derives a
    title.

    Args:
        text: Story text
        tagger: Tagger adapter, defaults to the shared spaCy tagger
        app_settings: Settings to use, defaults to the global settings
        rng: Random source for blank selection and title

    Returns:
        AnalysisResult with candidates and blanks. On failure, returns a
        result whose metadata carries the error instead of raising.
    """
    app_settings = app_settings or settings

    if not isinstance(text, str):
        logger.error(f"Invalid input type received: {type(text)}")
        return AnalysisResult(
            original_text=str(text),
            metadata={"error": "Invalid input format", "status": "failed"},
        )

    if not text.strip():
        logger.warning("Empty text provided for analysis")
        return AnalysisResult(
            original_text=text,
            title=title_for(text, rng),
            metadata={"count": 0, "candidate_count": 0},
        )

    try:
        tagger = tagger or TaggerService.get_instance(app_settings)

        logger.info(
            "Starting analysis request",
            extra={
                "text_length": len(text),
                "distribution": app_settings.distribution,
            },
        )

        tagged = tagger.tag(text)
        candidates = extract(
            tagged, include_adverbs=app_settings.include_adverbs, source_text=text
        )
        blanks = select(candidates, app_settings.selection_config(), rng)

        return AnalysisResult(
            original_text=text,
            candidates=candidates,
            blanks=blanks,
            title=title_for(text, rng),
            metadata={
                "count": len(blanks),
                "candidate_count": len(candidates),
                "categories": sorted({b.part_of_speech for b in blanks}),
            },
        )

    except (InitializationError, TaggerError, ConfigurationError) as e:
        # Known errors, log with context but hide internal details in response
        logger.error(
            f"Known error during analysis: {type(e).__name__}",
            exc_info=True,
            extra={"text_length": len(text)},
        )
        return AnalysisResult(
            original_text=text,
            metadata={
                "error": "Could not analyze this text.",
                "status": "failed",
                "error_type": type(e).__name__,
            },
        )

    except Exception:
        # Catch-all for unexpected bugs
        logger.error(
            "Unexpected critical error in analysis pipeline",
            exc_info=True,
            extra={"text_length": len(text)},
        )
        return AnalysisResult(
            original_text=text,
            metadata={
                "error": "An unexpected system error occurred.",
                "status": "failed",
            },
        )
