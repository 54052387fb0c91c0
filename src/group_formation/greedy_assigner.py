"""Greedy single-pass assignment of participants to resources."""

import logging
from typing import List, Sequence

from src.group_formation.capacity_tracker import CapacityTracker
from src.group_formation.models import Assignment, Participant, PreferenceTuple

logger = logging.getLogger(__name__)


def assign_greedily(
    participants: Sequence[Participant],
    tuples: Sequence[PreferenceTuple],
    tracker: CapacityTracker,
) -> List[Assignment]:
    """Commit claims in tie-break order until capacity runs out.

    Claims are visited once, lowest ``tie_break_key`` first. A claim is
    skipped when its participant is already placed or its resource is full;
    otherwise it is committed on the spot. Nothing is revisited, and a
    participant whose every claim is skipped stays unassigned.

    Args:
        participants: The participants the tuples were generated from; a
            tuple's ``participant_index`` points into this sequence.
        tuples: Candidate claims. Not modified.
        tracker: Slot bookkeeping for this run, updated in place.

    Returns:
        Assignments in commit order.
    """
    assigned_ids = set()
    assignments: List[Assignment] = []

    for claim in sorted(tuples, key=lambda t: t.tie_break_key):
        if claim.participant_id in assigned_ids:
            continue
        if not tracker.has_room(claim.resource_id):
            continue

        participant = participants[claim.participant_index]
        resource = tracker.resource(claim.resource_id)

        tracker.commit(claim.resource_id, participant, claim.rank)
        assigned_ids.add(claim.participant_id)
        assignments.append(
            Assignment(
                participant_id=participant.id,
                participant_name=participant.name,
                resource_id=resource.id,
                resource_title=resource.title,
                rank=claim.rank,
            )
        )

        logger.debug(
            "Assigned %s (%s) -> %s (rank %d)",
            participant.id,
            participant.name,
            resource.id,
            claim.rank,
        )

    return assignments
