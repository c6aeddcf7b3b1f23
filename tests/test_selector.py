"""Tests for blank selection strategies."""

import random

import pytest
from pydantic import ValidationError

from storygame.core.definitions import PartOfSpeech, SelectionPolicy
from storygame.core.domain import Token
from storygame.core.exceptions import ConfigurationError
from storygame.logic.extractor import extract
from storygame.logic.selector import (
    SelectionConfig,
    get_strategy,
    number_blanks,
    select,
)

ALL_POLICIES = [
    SelectionPolicy.RANDOM,
    SelectionPolicy.ROUND_ROBIN,
    SelectionPolicy.EVENLY_SPACED,
]


def make_candidates(count, pos=PartOfSpeech.NOUN, start=0, step=10):
    return [Token(f"word{i}", start + i * step, pos) for i in range(count)]


@pytest.fixture
def mixed_candidates():
    tokens = []
    tokens += make_candidates(20, PartOfSpeech.NOUN, start=0, step=50)
    tokens += [Token("ran", 5, PartOfSpeech.VERB, "past"), Token("hid", 305, PartOfSpeech.VERB, "past")]
    tokens += [Token("red", 15, PartOfSpeech.ADJECTIVE), Token("big", 515, PartOfSpeech.ADJECTIVE)]
    return sorted(tokens, key=lambda t: t.offset)


@pytest.mark.parametrize(
    "total,expected",
    [(0, 0), (1, 1), (7, 1), (8, 1), (16, 2), (80, 10), (500, 20)],
)
def test_target_count(total, expected):
    assert SelectionConfig().target_count(total) == expected


def test_target_count_respects_max_blanks():
    assert SelectionConfig(max_blanks=3, fraction=1.0).target_count(10) == 3


def test_config_validation():
    with pytest.raises(ValidationError):
        SelectionConfig(fraction=0)
    with pytest.raises(ValidationError):
        SelectionConfig(max_blanks=0)


def test_unknown_strategy():
    with pytest.raises(ConfigurationError):
        get_strategy("alphabetical")


def test_strategies_are_cached():
    assert get_strategy(SelectionPolicy.RANDOM) is get_strategy(SelectionPolicy.RANDOM)


def test_no_candidates_gives_empty_selection():
    assert select([], SelectionConfig()) == []


@pytest.mark.parametrize("policy", ALL_POLICIES)
def test_sorted_and_numbered(policy, mixed_candidates):
    config = SelectionConfig(fraction=0.5, distribution=policy, seed=3)
    blanks = select(mixed_candidates, config)

    assert len(blanks) == 12
    offsets = [b.offset for b in blanks]
    assert offsets == sorted(offsets)
    assert [b.display_index for b in blanks] == list(range(1, 13))
    assert len({b.id for b in blanks}) == 12


@pytest.mark.parametrize("policy", ALL_POLICIES)
def test_no_overlap(policy, fake_tagger, story):
    candidates = extract(fake_tagger.tag(story))
    blanks = select(candidates, SelectionConfig(fraction=1.0, distribution=policy))
    for left, right in zip(blanks, blanks[1:]):
        assert left.offset + len(left.text) <= right.offset


def test_round_robin_covers_categories():
    candidates = sorted(
        [
            Token("cat", 0, PartOfSpeech.NOUN),
            Token("hat", 10, PartOfSpeech.NOUN),
            Token("ran", 20, PartOfSpeech.VERB),
            Token("sat", 30, PartOfSpeech.VERB),
            Token("red", 40, PartOfSpeech.ADJECTIVE),
            Token("big", 50, PartOfSpeech.ADJECTIVE),
        ],
        key=lambda t: t.offset,
    )
    config = SelectionConfig(fraction=0.5, distribution=SelectionPolicy.ROUND_ROBIN)
    for seed in range(20):
        blanks = select(candidates, config, random.Random(seed))
        assert len(blanks) == 3
        assert {b.part_of_speech for b in blanks} == {
            PartOfSpeech.NOUN,
            PartOfSpeech.VERB,
            PartOfSpeech.ADJECTIVE,
        }


def test_round_robin_varies_category_of_few_blanks(fake_tagger, story):
    candidates = extract(fake_tagger.tag(story))
    config = SelectionConfig()
    assert config.target_count(len(candidates)) == 1

    single = set()
    pairs = set()
    for seed in range(50):
        single |= {b.part_of_speech for b in select(candidates, config, random.Random(seed))}
        two = select(candidates, SelectionConfig(fraction=0.15), random.Random(seed))
        assert len(two) == 2
        pairs |= {b.part_of_speech for b in two}

    assert len(single) > 1
    assert pairs == {PartOfSpeech.NOUN, PartOfSpeech.VERB, PartOfSpeech.ADJECTIVE}


def test_round_robin_keeps_going_after_category_runs_out(mixed_candidates):
    config = SelectionConfig(fraction=0.5, distribution=SelectionPolicy.ROUND_ROBIN, seed=1)
    blanks = select(mixed_candidates, config)
    categories = [b.part_of_speech for b in blanks]
    assert categories.count(PartOfSpeech.VERB) == 2
    assert categories.count(PartOfSpeech.ADJECTIVE) == 2
    assert categories.count(PartOfSpeech.NOUN) == 8


def test_same_seed_same_selection(mixed_candidates):
    config = SelectionConfig(fraction=0.25, distribution=SelectionPolicy.RANDOM, seed=11)
    assert select(mixed_candidates, config) == select(mixed_candidates, config)


def test_evenly_spaced_respects_gap():
    candidates = make_candidates(10, step=10)
    config = SelectionConfig(
        fraction=0.3, distribution=SelectionPolicy.EVENLY_SPACED, min_gap=30
    )
    blanks = select(candidates, config)
    assert [b.offset for b in blanks] == [0, 30, 60]


def test_evenly_spaced_tops_up_when_gap_too_wide():
    candidates = make_candidates(4, step=10)
    config = SelectionConfig(
        fraction=0.75, distribution=SelectionPolicy.EVENLY_SPACED, min_gap=100
    )
    blanks = select(candidates, config)
    assert [b.offset for b in blanks] == [0, 10, 20]


def test_number_blanks_uses_offset_order():
    tokens = [Token("b", 9, PartOfSpeech.NOUN), Token("a", 2, PartOfSpeech.NOUN)]
    blanks = number_blanks(tokens)
    assert [(b.text, b.display_index) for b in blanks] == [("a", 1), ("b", 2)]
    assert blanks[0].id == "noun-2"
