"""Tie-break sources for ordering claims that share the same rank.

A tie-break source yields a value in ``[0, TIE_BREAK_SPAN)`` for every
preference tuple. The value is added to ``rank * RANK_SCALE``, so it only
reorders claims within a rank and can never lift a lower-priority rank above
a higher-priority one.

Sources are factories: :meth:`start_run` returns a fresh per-run drawer plus
the seed it uses, so one source can serve concurrent runs without sharing
generator state.
"""

import logging
import random
from typing import Callable, Optional, Tuple

from src.group_formation.config import TIE_BREAK_SPAN

logger = logging.getLogger(__name__)

# (participant_index, participant_count) -> value in [0, TIE_BREAK_SPAN)
TieBreakDraw = Callable[[int, int], float]


class RandomTieBreak:
    """Seeded pseudo-random tie-break.

    With a fixed ``seed`` every run orders ties identically. Without one,
    each run draws a fresh seed from the OS entropy source; the seed is
    logged and reported on the result so the run can be replayed.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed

    def start_run(self) -> Tuple[TieBreakDraw, Optional[int]]:
        seed = self.seed
        if seed is None:
            seed = random.SystemRandom().randrange(2**32)
        rng = random.Random(seed)
        logger.info("Random tie-break seeded with %d", seed)

        def draw(participant_index: int, participant_count: int) -> float:
            return rng.random() * TIE_BREAK_SPAN

        return draw, seed


class DeterministicTieBreak:
    """Stable tie-break: earlier participants in the snapshot win ties."""

    def start_run(self) -> Tuple[TieBreakDraw, Optional[int]]:
        def draw(participant_index: int, participant_count: int) -> float:
            return TIE_BREAK_SPAN * participant_index / max(participant_count, 1)

        return draw, None
