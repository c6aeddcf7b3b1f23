# storygame/core/loader.py

"""Vocabulary loader for titles, word-type hints, and bot prompts."""

import yaml
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional

from storygame.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class VocabularyLoader:
    """Singleton loader for the game vocabulary.

    Loads vocabulary.yaml once and caches it for the application lifecycle.
    """

    _instance: Optional["VocabularyLoader"] = None
    _config: Dict[str, Any] = {}
    _loaded: bool = False

    def __new__(cls) -> "VocabularyLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not VocabularyLoader._loaded:
            self._load_config()

    def _load_config(self) -> None:
        """Loads vocabulary.yaml from the module directory.

        Raises:
            ConfigurationError: If file is missing, invalid, or empty.
        """
        try:
            config_path = Path(__file__).parent / "vocabulary.yaml"

            if not config_path.exists():
                error_msg = f"Vocabulary file not found: {config_path}"
                logger.error(error_msg)
                raise ConfigurationError(error_msg)

            with open(config_path, "r", encoding="utf-8") as f:
                VocabularyLoader._config = yaml.safe_load(f)

            if not VocabularyLoader._config:
                raise ConfigurationError("Vocabulary file is empty or invalid")

            self._validate_config()

            VocabularyLoader._loaded = True
            logger.info(
                "Vocabulary loaded successfully",
                extra={
                    "config_path": str(config_path),
                    "cluster_count": len(self.get_title_clusters()),
                    "prompt_count": len(VocabularyLoader._config["prompts"]),
                },
            )

        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}", exc_info=True)
            raise ConfigurationError(f"Failed to parse vocabulary.yaml: {e}") from e
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Vocabulary loading failed: {e}", exc_info=True)
            raise ConfigurationError(f"Failed to load vocabulary: {e}") from e

    def _validate_config(self) -> None:
        """Validates required sections exist.

        Raises:
            ConfigurationError: If required sections are missing.
        """
        required_sections = ["titles", "word_types", "prompts"]
        missing = [s for s in required_sections if s not in VocabularyLoader._config]

        if missing:
            error_msg = f"Missing required vocabulary sections: {missing}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        if not VocabularyLoader._config["titles"].get("generic"):
            raise ConfigurationError("Vocabulary needs at least one generic title")

    @classmethod
    def get_instance(cls) -> "VocabularyLoader":
        """Returns the singleton instance of VocabularyLoader."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get_title_clusters(self) -> List[Dict[str, Any]]:
        """Returns keyword clusters in declaration order.

        Returns:
            List of dictionaries with 'name', 'title', 'keywords' keys
        """
        clusters = self._config.get("titles", {}).get("clusters", [])
        return clusters if clusters else []

    def get_generic_titles(self) -> List[str]:
        """Returns the pool of titles used when no cluster matches."""
        return list(self._config.get("titles", {}).get("generic", []))

    def get_word_type_hint(self, word_type: str) -> str:
        """Retrieves a short explanation of a word type.

        Args:
            word_type: Part of speech or tense (e.g., 'noun', 'past')

        Returns:
            Hint text, empty string if the word type is unknown
        """
        return self._config.get("word_types", {}).get(word_type, "")

    def get_prompt(self, key: str, **values: Any) -> str:
        """Returns a bot prompt with placeholders filled in.

        Args:
            key: Prompt name (e.g., 'first_question')
            **values: Values for the prompt's format fields

        Raises:
            ConfigurationError: If the prompt is not defined.
        """
        template = self._config.get("prompts", {}).get(key)
        if template is None:
            raise ConfigurationError(f"Prompt '{key}' is not defined")
        return template.format(**values)
