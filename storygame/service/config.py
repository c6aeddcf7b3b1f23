# storygame/service/config.py

"""Application configuration using Pydantic Settings.

Manages environment variables, defaults, and validation rules.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from storygame.logic.selector import SelectionConfig


class Settings(BaseSettings):
    """Global application settings.

    Loads values from environment variables (prefix 'STORYGAME_') or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="STORYGAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Tagger
    spacy_model: str = Field(
        default="en_core_web_sm", description="SpaCy model name to use for tagging."
    )

    min_word_length: int = Field(
        default=2,
        ge=1,
        description="Minimum word characters for a word to be a candidate.",
    )

    include_adverbs: bool = Field(
        default=False, description="Whether adverbs can become blanks."
    )

    # Blank selection
    max_blanks: int = Field(default=20, ge=1, description="Maximum number of blanks.")

    blank_fraction: float = Field(
        default=0.125,
        gt=0.0,
        le=1.0,
        description="Share of candidate words turned into blanks.",
    )

    distribution: Literal["random", "round_robin", "evenly_spaced"] = Field(
        default="round_robin", description="How blanks are spread over the story."
    )

    selection_seed: Optional[int] = Field(
        default=None, description="Seed for reproducible blank selection."
    )

    # Output
    highlight_marker: str = Field(
        default="**", description="Marker wrapped around replaced words."
    )

    placeholder_width: int = Field(
        default=5, ge=1, description="Underscores on each side of a template number."
    )

    allow_partial_fill: bool = Field(
        default=False,
        description="Let direct-fill stories be generated with empty words.",
    )

    # UI and collaborators
    max_input_chars: int = Field(
        default=5000, ge=1, description="Longest story the UI accepts."
    )

    stories_db_path: Optional[str] = Field(
        default=None, description="SQLite database of stories for random picks."
    )

    log_level: str = Field(default="INFO", description="Root logging level.")

    @field_validator("spacy_model")
    @classmethod
    def validate_model_name(cls, v: str) -> str:
        """Ensure model name is not empty."""
        if not v.strip():
            raise ValueError("SpaCy model name cannot be empty")
        return v

    @field_validator("highlight_marker")
    @classmethod
    def validate_marker(cls, v: str) -> str:
        """Ensure the highlight marker is visible."""
        if not v.strip():
            raise ValueError("Highlight marker cannot be blank")
        if "\\" in v:
            raise ValueError("Highlight marker cannot contain a backslash")
        return v

    def selection_config(self) -> SelectionConfig:
        """Selection options derived from these settings."""
        return SelectionConfig(
            max_blanks=self.max_blanks,
            fraction=self.blank_fraction,
            distribution=self.distribution,
            seed=self.selection_seed,
        )


# Singleton settings instance
settings = Settings()
