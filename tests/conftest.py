"""Shared fixtures: a deterministic lexicon tagger and test settings."""

import random
import re

import pytest

from storygame.core.definitions import Tense, WordClass
from storygame.core.domain import Blank, Token
from storygame.engine.tagger import RawToken, Tagger
from storygame.service.config import Settings

LEXICON = {
    "quick": (WordClass.ADJECTIVE, None),
    "brown": (WordClass.ADJECTIVE, None),
    "lazy": (WordClass.ADJECTIVE, None),
    "beautiful": (WordClass.ADJECTIVE, None),
    "brave": (WordClass.ADJECTIVE, None),
    "terrible": (WordClass.ADJECTIVE, None),
    "fox": (WordClass.NOUN, None),
    "dog": (WordClass.NOUN, None),
    "cat": (WordClass.NOUN, None),
    "princess": (WordClass.NOUN, None),
    "moonlight": (WordClass.NOUN, None),
    "knight": (WordClass.NOUN, None),
    "dragon": (WordClass.NOUN, None),
    "jumps": (WordClass.VERB, Tense.PRESENT),
    "chased": (WordClass.VERB, Tense.PAST),
    "danced": (WordClass.VERB, Tense.PAST),
    "fought": (WordClass.VERB, Tense.PAST),
    "sleeping": (WordClass.VERB, Tense.GERUND),
    "run": (WordClass.VERB, None),
    "gracefully": (WordClass.ADVERB, None),
}

STORY = (
    "The quick brown fox jumps over the lazy dog. The beautiful princess danced "
    "gracefully in the moonlight while the brave knight fought the terrible dragon."
)


class FakeTagger(Tagger):
    """Lexicon tagger that reports no offsets unless asked to."""

    WORD = re.compile(r"[A-Za-z'-]+|[^\w\s]")

    def __init__(self, lexicon=None, native_offsets=False, min_word_length=2):
        super().__init__(min_word_length=min_word_length)
        self.lexicon = LEXICON if lexicon is None else lexicon
        self.native_offsets = native_offsets
        self.calls = 0

    def _analyze(self, text):
        self.calls += 1
        for match in self.WORD.finditer(text):
            word = match.group()
            word_class, tense = self.lexicon.get(word.lower(), (WordClass.OTHER, None))
            yield RawToken(
                text=word,
                word_class=word_class,
                offset=match.start() if self.native_offsets else None,
                tense=tense,
            )


class BrokenTagger(Tagger):
    """Tagger whose underlying engine always fails."""

    def _analyze(self, text):
        raise RuntimeError("tagger crashed")


def make_blanks(*specs):
    """Builds numbered blanks from (text, offset, part_of_speech) tuples."""
    ordered = sorted(specs, key=lambda s: s[1])
    return [
        Blank(token=Token(text, offset, pos), display_index=i)
        for i, (text, offset, pos) in enumerate(ordered, 1)
    ]


@pytest.fixture
def fake_tagger():
    return FakeTagger()


@pytest.fixture
def app_settings():
    return Settings(_env_file=None, selection_seed=7)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def story():
    return STORY
