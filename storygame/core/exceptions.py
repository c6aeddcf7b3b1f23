# storygame/core/exceptions.py

"""Custom exception hierarchy for the story game.

This module defines the specific error types used throughout the application
to differentiate between configuration, tagging, and game-flow errors.
"""


class StoryGameError(Exception):
    """Base exception for all application-specific errors."""

    pass


class ConfigurationError(StoryGameError):
    """Raised when configuration or vocabulary loading fails."""

    pass


class InitializationError(StoryGameError):
    """Raised when the tagger model or other resources fail to initialize."""

    pass


class TaggerError(StoryGameError):
    """Raised when the grammatical tagger cannot analyze the input as a whole."""

    pass


class IncompleteReplacementsError(StoryGameError):
    """Raised when a story is generated before every blank has a word."""

    def __init__(self, missing_ids):
        self.missing_ids = list(missing_ids)
        super().__init__(f"{len(self.missing_ids)} blank(s) still need a word")


class InvalidTransitionError(StoryGameError):
    """Raised when a game action is not allowed in the current phase."""

    pass


class StorySourceError(StoryGameError):
    """Raised when the random story source cannot supply a story."""

    pass
