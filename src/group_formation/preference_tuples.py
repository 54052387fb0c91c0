"""Expand ranked preference lists into sortable candidate claims."""

import logging
from typing import List, Sequence, Tuple

from src.group_formation.capacity_tracker import CapacityTracker
from src.group_formation.config import RANK_SCALE
from src.group_formation.models import Participant, PreferenceTuple
from src.group_formation.tie_break import TieBreakDraw

logger = logging.getLogger(__name__)


def generate_preference_tuples(
    participants: Sequence[Participant],
    tracker: CapacityTracker,
    draw: TieBreakDraw,
) -> Tuple[List[PreferenceTuple], int]:
    """Build one tuple per known (participant, resource) preference.

    Args:
        participants: Participants with non-empty preference lists, in
            snapshot order.
        tracker: Resource lookup for this run.
        draw: Per-run tie-break drawer.

    Returns:
        ``(tuples, dropped)`` where ``dropped`` counts preference entries that
        named a resource missing from the snapshot. Those entries are skipped,
        not reported as errors.
    """
    tuples: List[PreferenceTuple] = []
    dropped = 0
    count = len(participants)

    for index, participant in enumerate(participants):
        for position, resource_id in enumerate(participant.preferences):
            if resource_id not in tracker:
                dropped += 1
                logger.debug(
                    "Dropping preference of %s for unknown resource %r",
                    participant.id,
                    resource_id,
                )
                continue

            rank = position + 1
            tuples.append(
                PreferenceTuple(
                    participant_index=index,
                    participant_id=participant.id,
                    resource_id=resource_id,
                    rank=rank,
                    tie_break_key=rank * RANK_SCALE + draw(index, count),
                )
            )

    return tuples, dropped
