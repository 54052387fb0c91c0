"""Run statistics and resource-grouped membership lists."""

import math
from typing import Dict, List, Sequence

from src.group_formation.capacity_tracker import CapacityTracker
from src.group_formation.config import SATISFACTION_WEIGHTS
from src.group_formation.models import AllocationStats, Assignment, Group


def rank_bucket(rank: int) -> str:
    """Map a 1-based rank to its statistics bucket."""
    if rank == 1:
        return "first_choice"
    if rank == 2:
        return "second_choice"
    if rank == 3:
        return "third_choice"
    return "other_choice"


def satisfaction_score(bucket_counts: Dict[str, int], assigned: int) -> float:
    """Weighted average of bucket weights over assigned participants.

    Formula::

        score = (100*first + 66*second + 33*third + 10*other) / assigned

    rounded half-up to one decimal; ``0.0`` when nobody was assigned.
    """
    if assigned <= 0:
        return 0.0
    weighted = sum(
        SATISFACTION_WEIGHTS[bucket] * count
        for bucket, count in bucket_counts.items()
    )
    return math.floor(weighted / assigned * 10 + 0.5) / 10


def calculate_stats(
    assignments: Sequence[Assignment],
    total_participants: int,
    participants_with_preferences: int,
) -> AllocationStats:
    bucket_counts = {bucket: 0 for bucket in SATISFACTION_WEIGHTS}
    for assignment in assignments:
        bucket_counts[rank_bucket(assignment.rank)] += 1

    assigned = len(assignments)
    return AllocationStats(
        total_participants=total_participants,
        participants_with_preferences=participants_with_preferences,
        assigned=assigned,
        unassigned=participants_with_preferences - assigned,
        satisfaction_score=satisfaction_score(bucket_counts, assigned),
        **bucket_counts,
    )


def build_groups(tracker: CapacityTracker) -> List[Group]:
    """One group per resource that received members, in snapshot order."""
    groups = []
    for slot in tracker.slots():
        if not slot.assigned_members:
            continue
        groups.append(
            Group(
                resource_id=slot.resource.id,
                resource_title=slot.resource.title,
                members=tuple(slot.assigned_members),
            )
        )
    return groups
