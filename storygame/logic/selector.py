# storygame/logic/selector.py

"""Selection strategies that choose which candidates become blanks."""

import logging
import math
import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from storygame.core.definitions import PartOfSpeech, SelectionPolicy
from storygame.core.domain import Blank, Token
from storygame.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class SelectionConfig(BaseModel):
    """How many blanks to pick and how to spread them."""

    max_blanks: int = Field(default=20, ge=1, description="Hard ceiling on blanks.")
    fraction: float = Field(
        default=0.125,
        gt=0.0,
        le=1.0,
        description="Target share of candidates to turn into blanks.",
    )
    distribution: str = Field(
        default=SelectionPolicy.ROUND_ROBIN,
        description="One of random, round_robin, evenly_spaced.",
    )
    min_gap: int = Field(
        default=0,
        ge=0,
        description="Minimum characters between evenly spaced blanks; 0 derives it.",
    )
    seed: Optional[int] = Field(
        default=None, description="Seed for reproducible selections."
    )

    def target_count(self, total_candidates: int) -> int:
        """Number of blanks to pick from total_candidates."""
        if total_candidates <= 0:
            return 0
        wanted = math.floor(total_candidates * self.fraction)
        return max(1, min(wanted, self.max_blanks, total_candidates))


class SelectionStrategy(ABC):
    """Base class for blank selection strategies.

    Strategies decide which candidates are picked, never how many.
    """

    name: str = ""

    @abstractmethod
    def choose(
        self, candidates: List[Token], count: int, config: SelectionConfig, rng: random.Random
    ) -> List[Token]:
        """Picks count candidates.

        Args:
            candidates: Candidates ordered by offset
            count: Number of candidates to pick
            config: Selection configuration
            rng: Random source

        Returns:
            Picked candidates in any order
        """
        pass


class RandomStrategy(SelectionStrategy):
    """Uniform random pick. Can cluster blanks or starve a category."""

    name = SelectionPolicy.RANDOM

    def choose(self, candidates, count, config, rng):
        pool = list(candidates)
        rng.shuffle(pool)
        return pool[:count]


class RoundRobinStrategy(SelectionStrategy):
    """Takes one candidate per category in turn so no category crowds out the rest."""

    name = SelectionPolicy.ROUND_ROBIN

    def choose(self, candidates, count, config, rng):
        partitions: Dict[str, List[Token]] = {pos: [] for pos in PartOfSpeech.ALL}
        for token in candidates:
            partitions.setdefault(token.part_of_speech, []).append(token)

        queues = [tokens for tokens in partitions.values() if tokens]
        for queue in queues:
            rng.shuffle(queue)
        # Category order is shuffled as well
        rng.shuffle(queues)

        picked: List[Token] = []
        while len(picked) < count and queues:
            for queue in queues:
                if len(picked) >= count:
                    break
                picked.append(queue.pop())
            queues = [queue for queue in queues if queue]

        return picked


class EvenlySpacedStrategy(SelectionStrategy):
    """Greedy walk keeping a minimum character gap between blanks.

    Avoids clustering but can starve a category; when the gap leaves the
    selection short it is topped up with the remaining candidates in order.
    """

    name = SelectionPolicy.EVENLY_SPACED

    def choose(self, candidates, count, config, rng):
        if not candidates:
            return []

        gap = config.min_gap
        if not gap:
            span = candidates[-1].end - candidates[0].offset
            gap = span // count if count else span

        picked: List[Token] = []
        last_offset: Optional[int] = None
        for token in candidates:
            if len(picked) >= count:
                break
            if last_offset is None or token.offset - last_offset >= gap:
                picked.append(token)
                last_offset = token.offset

        if len(picked) < count:
            chosen = {t.id for t in picked}
            for token in candidates:
                if len(picked) >= count:
                    break
                if token.id not in chosen:
                    picked.append(token)

        return picked


# Cache for strategy instances; they hold no state
_strategy_cache: Dict[str, SelectionStrategy] = {}


def get_strategy(name: str) -> SelectionStrategy:
    """Factory method to retrieve a selection strategy by name.

    Raises:
        ConfigurationError: If no strategy has that name.
    """
    if name in _strategy_cache:
        return _strategy_cache[name]

    lookup = {
        SelectionPolicy.RANDOM: RandomStrategy,
        SelectionPolicy.ROUND_ROBIN: RoundRobinStrategy,
        SelectionPolicy.EVENLY_SPACED: EvenlySpacedStrategy,
    }

    strategy_class = lookup.get(name)
    if strategy_class is None:
        logger.error(f"Unknown selection strategy: {name}")
        raise ConfigurationError(f"Unknown selection strategy '{name}'")

    instance = strategy_class()
    _strategy_cache[name] = instance
    return instance


def number_blanks(tokens: List[Token]) -> List[Blank]:
    """Sorts tokens by offset and numbers them 1..N in that order."""
    ordered = sorted(tokens, key=lambda t: t.offset)
    return [Blank(token=token, display_index=i) for i, token in enumerate(ordered, 1)]


def select(
    candidates: List[Token],
    config: Optional[SelectionConfig] = None,
    rng: Optional[random.Random] = None,
) -> List[Blank]:
    """Chooses the blanks for one analysis.

    Args:
        candidates: Candidate set for the text
        config: Selection configuration, defaults to SelectionConfig()
        rng: Random source; a seeded one is created from config.seed if absent

    Returns:
        Blanks ordered by offset, numbered from 1. Empty when there are no
        candidates.
    """
    config = config or SelectionConfig()
    strategy = get_strategy(config.distribution)

    ordered = sorted(candidates, key=lambda t: t.offset)
    count = config.target_count(len(ordered))
    if count == 0:
        logger.info("No candidates to select blanks from")
        return []

    if rng is None:
        rng = random.Random(config.seed)

    picked = strategy.choose(ordered, count, config, rng)
    blanks = number_blanks(picked)

    logger.info(
        "Selected blanks",
        extra={
            "strategy": strategy.name,
            "candidate_count": len(ordered),
            "blank_count": len(blanks),
        },
    )
    return blanks
