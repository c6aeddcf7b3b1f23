# storygame/engine/spacy_driver.py

"""SpaCy tagger adapter with a word-class and tense policy."""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

import spacy
from spacy.tokens import Doc, Token

from storygame.core.definitions import WordClass, Tense
from storygame.core.exceptions import InitializationError
from storygame.engine.tagger import RawToken, Tagger

logger = logging.getLogger(__name__)


class SpacyClassificationPolicy:
    """Maps spaCy part-of-speech labels onto tagger-independent word classes."""

    POS_TO_WORD_CLASS = {
        "NOUN": WordClass.NOUN,
        "PROPN": WordClass.NOUN,
        "ADJ": WordClass.ADJECTIVE,
        "ADV": WordClass.ADVERB,
        "VERB": WordClass.VERB,
    }

    FUTURE_MODALS = {"will", "shall", "'ll", "wo"}

    # Words allowed between a modal and its verb ("will not go", "will soon go")
    MODAL_GAP_POS = {"ADV", "PART"}

    def classify(self, token: Token) -> Tuple[str, Optional[str]]:
        """Returns (word_class, tense) for a spaCy token."""
        word_class = self.POS_TO_WORD_CLASS.get(token.pos_, WordClass.OTHER)
        if word_class != WordClass.VERB:
            return word_class, None
        return word_class, self.verb_tense(token)

    def verb_tense(self, token: Token) -> Optional[str]:
        tag = token.tag_
        tense = token.morph.get("Tense")
        verb_form = token.morph.get("VerbForm")

        if tag == "VB" and self._follows_future_modal(token):
            return Tense.FUTURE
        if tag == "VBG" or "Ger" in verb_form:
            return Tense.GERUND
        if tag in ("VBD", "VBN") or "Past" in tense:
            return Tense.PAST
        if tag == "VB" or "Inf" in verb_form:
            return Tense.INFINITIVE
        if tag in ("VBZ", "VBP") or "Pres" in tense:
            return Tense.PRESENT
        return None

    def _follows_future_modal(self, token: Token) -> bool:
        doc = token.doc
        i = token.i - 1
        while i >= 0 and doc[i].pos_ in self.MODAL_GAP_POS:
            i -= 1
        return i >= 0 and doc[i].lower_ in self.FUTURE_MODALS


class SpacyTagger(Tagger):
    """Tagger adapter backed by a spaCy pipeline.

    The pipeline is loaded on first use unless one is injected.
    """

    def __init__(
        self,
        model_name: str = "en_core_web_sm",
        min_word_length: int = 2,
        nlp: Optional[Callable[[str], Doc]] = None,
        policy: Optional[SpacyClassificationPolicy] = None,
        exclude: Optional[List[str]] = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            model_name: SpaCy model to load when no pipeline is injected
            min_word_length: Minimum word characters for a candidate token
            nlp: Ready pipeline (or any callable returning a Doc)
            policy: Word-class policy, defaults to SpacyClassificationPolicy
            exclude: Pipeline components to skip when loading the model
        """
        super().__init__(min_word_length=min_word_length)
        self.model_name = model_name
        self.policy = policy or SpacyClassificationPolicy()
        # Word classes come from the tagger and morphologizer only
        self.exclude = exclude if exclude is not None else ["ner", "parser", "textcat"]
        self._nlp = nlp

    @property
    def nlp(self) -> Callable[[str], Doc]:
        if self._nlp is None:
            self._nlp = self._load_model()
        return self._nlp

    def _load_model(self):
        """Loads the spaCy model.

        Raises:
            InitializationError: If the model is not installed or cannot load.
        """
        logger.info(f"Loading spaCy model '{self.model_name}' excluding {self.exclude}")
        try:
            return spacy.load(self.model_name, exclude=self.exclude)
        except OSError as e:
            logger.critical(
                f"SpaCy model '{self.model_name}' not found. "
                "Ensure it is installed in the environment."
            )
            raise InitializationError(
                f"Missing required SpaCy model '{self.model_name}'"
            ) from e

    def _analyze(self, text: str) -> Iterable[RawToken]:
        doc = self.nlp(text)
        for token in doc:
            if token.is_space:
                continue
            try:
                word_class, tense = self.policy.classify(token)
            except Exception:
                logger.warning(
                    "Skipping token the policy could not classify",
                    exc_info=True,
                    extra={"token": token.text, "offset": token.idx},
                )
                continue
            yield RawToken(
                text=token.text,
                word_class=word_class,
                offset=token.idx,
                tense=tense,
                tags=(token.pos_, token.tag_, str(token.morph)),
            )
