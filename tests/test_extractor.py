"""Tests for candidate extraction."""

from storygame.core.definitions import PartOfSpeech, Tense, WordClass
from storygame.core.domain import TaggedToken
from storygame.logic.extractor import categorize, extract


def tagged(text, offset, word_class, tense=None):
    return TaggedToken(text=text, offset=offset, word_class=word_class, tense=tense)


def test_categories_and_ids(fake_tagger, story):
    candidates = extract(fake_tagger.tag(story), source_text=story)
    by_text = {c.text: c for c in candidates}

    assert by_text["fox"].part_of_speech == PartOfSpeech.NOUN
    assert by_text["quick"].part_of_speech == PartOfSpeech.ADJECTIVE
    assert by_text["danced"].tense == Tense.PAST
    assert by_text["fox"].id == f"noun-{story.index('fox')}"
    assert "gracefully" not in by_text
    assert "The" not in by_text


def test_offset_fidelity(fake_tagger, story):
    for token in extract(fake_tagger.tag(story)):
        assert story[token.offset : token.offset + len(token.text)] == token.text


def test_adverbs_only_when_enabled(fake_tagger, story):
    candidates = extract(fake_tagger.tag(story), include_adverbs=True)
    adverbs = [c for c in candidates if c.part_of_speech == PartOfSpeech.ADVERB]
    assert [a.text for a in adverbs] == ["gracefully"]


def test_verb_without_tense_defaults_to_present():
    token = categorize(tagged("run", 0, WordClass.VERB))
    assert token.tense == Tense.PRESENT


def test_non_verbs_have_no_tense():
    assert categorize(tagged("fox", 0, WordClass.NOUN, Tense.PAST)).tense is None


def test_other_words_excluded():
    assert categorize(tagged("the", 0, WordClass.OTHER)) is None


def test_exact_duplicates_collapsed():
    tokens = [
        tagged("fox", 4, WordClass.NOUN),
        tagged("fox", 4, WordClass.NOUN),
        tagged("fox", 4, WordClass.ADJECTIVE),
        tagged("fox", 12, WordClass.NOUN),
    ]
    candidates = extract(tokens)
    assert [(c.offset, c.part_of_speech) for c in candidates] == [
        (4, PartOfSpeech.NOUN),
        (12, PartOfSpeech.NOUN),
    ]
    assert len({c.id for c in candidates}) == len(candidates)


def test_sorted_by_offset():
    tokens = [tagged("dog", 20, WordClass.NOUN), tagged("cat", 4, WordClass.NOUN)]
    assert [c.offset for c in extract(tokens)] == [4, 20]


def test_mismatched_offsets_dropped():
    tokens = [tagged("cat", 0, WordClass.NOUN), tagged("dog", 4, WordClass.NOUN)]
    candidates = extract(tokens, source_text="cat and dog")
    assert [c.text for c in candidates] == ["cat"]


def test_empty_input():
    assert extract([]) == []
