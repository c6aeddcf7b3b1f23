# storygame/core/definitions.py

"""Closed vocabularies shared by the tagger, selector, and game flow."""


class WordClass:
    """Tagger-independent word classes every tagger adapter maps onto."""

    NOUN = "Noun"
    VERB = "Verb"
    ADJECTIVE = "Adjective"
    ADVERB = "Adverb"
    OTHER = "Other"


class PartOfSpeech:
    """Categories a candidate word can belong to."""

    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"

    # Order used when partitioning candidates by category
    ALL = (NOUN, VERB, ADJECTIVE, ADVERB)


class Tense:
    """Verb tense sub-classification."""

    PRESENT = "present"
    PAST = "past"
    FUTURE = "future"
    GERUND = "gerund"
    INFINITIVE = "infinitive"


class SelectionPolicy:
    """Names of the blank selection strategies."""

    RANDOM = "random"
    ROUND_ROBIN = "round_robin"
    EVENLY_SPACED = "evenly_spaced"


class GameMode:
    """How replacement words are collected."""

    DIRECT_FILL = "direct_fill"
    TEMPLATE = "template"
    CONVERSATION = "conversation"


class GamePhase:
    """Phases of a single game session."""

    SETUP = "setup"
    PLAYING = "playing"
    CHATTING = "chatting"
    COMPLETED = "completed"
