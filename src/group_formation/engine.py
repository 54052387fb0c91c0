"""Group formation engine - orchestrates one allocation run."""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from src.group_formation.capacity_tracker import CapacityTracker
from src.group_formation.config import NO_PREFERENCES_ERROR
from src.group_formation.greedy_assigner import assign_greedily
from src.group_formation.input_validator import validate_allocation_input
from src.group_formation.models import (
    AlgorithmResult,
    AllocationStats,
    Participant,
    Resource,
    ValidationResult,
)
from src.group_formation.preference_tuples import generate_preference_tuples
from src.group_formation.stats_calculator import build_groups, calculate_stats
from src.group_formation.tie_break import RandomTieBreak

logger = logging.getLogger(__name__)

ParticipantLike = Union[Participant, Mapping[str, Any]]
ResourceLike = Union[Resource, Mapping[str, Any]]


def _as_participants(items: Iterable[ParticipantLike]) -> List[Participant]:
    return [
        p if isinstance(p, Participant) else Participant.from_dict(p)
        for p in items
    ]


def _as_resources(items: Iterable[ResourceLike]) -> List[Resource]:
    return [r if isinstance(r, Resource) else Resource.from_dict(r) for r in items]


class GroupFormationEngine:
    """Assigns participants to resources from their ranked preferences.

    Coordinates the tuple generator, greedy assigner and statistics
    calculator over one immutable snapshot. The engine keeps no state
    between runs apart from its tie-break source, so one instance can be
    shared by concurrent callers.
    """

    def __init__(self, tie_break=None):
        """
        Args:
            tie_break: Object with ``start_run() -> (draw, seed)``. Defaults
                to :class:`RandomTieBreak` with a fresh seed per run.
        """
        self.tie_break = tie_break or RandomTieBreak()

    def preview(
        self,
        participants: Iterable[ParticipantLike],
        resources: Iterable[ResourceLike],
    ) -> ValidationResult:
        """Pre-flight check: demand vs. capacity, without allocating."""
        return validate_allocation_input(
            _as_participants(participants), _as_resources(resources)
        )

    def run(
        self,
        participants: Iterable[ParticipantLike],
        resources: Iterable[ResourceLike],
    ) -> AlgorithmResult:
        """Run one allocation.

        Args:
            participants: ``Participant`` objects or ``{id, name,
                preferences}`` dicts.
            resources: ``Resource`` objects or ``{id, title, capacity}``
                dicts.

        Returns:
            AlgorithmResult. ``success`` is False only when no participant
            has submitted preferences; running out of capacity is reported
            through ``stats.unassigned`` instead.
        """
        participant_list = _as_participants(participants)
        resource_list = _as_resources(resources)

        with_prefs = [p for p in participant_list if p.has_preferences]
        if not with_prefs:
            logger.warning(
                "Allocation skipped: none of %d participants has preferences",
                len(participant_list),
            )
            return AlgorithmResult(
                success=False,
                error=NO_PREFERENCES_ERROR,
                stats=AllocationStats(total_participants=len(participant_list)),
            )

        tracker = CapacityTracker(resource_list)
        draw, seed = self.tie_break.start_run()

        tuples, dropped = generate_preference_tuples(with_prefs, tracker, draw)
        assignments = assign_greedily(with_prefs, tuples, tracker)

        stats = calculate_stats(
            assignments,
            total_participants=len(participant_list),
            participants_with_preferences=len(with_prefs),
        )
        groups = build_groups(tracker)

        if dropped:
            logger.info(
                "Ignored %d preference entries naming unknown resources", dropped
            )
        logger.info(
            "Allocation complete: %d/%d assigned across %d groups, "
            "%d unassigned, satisfaction %.1f (seed=%s)",
            stats.assigned,
            stats.participants_with_preferences,
            len(groups),
            stats.unassigned,
            stats.satisfaction_score,
            seed,
        )

        return AlgorithmResult(
            success=True,
            stats=stats,
            assignments=tuple(assignments),
            groups=tuple(groups),
            tie_break_seed=seed,
            dropped_preferences=dropped,
        )


def run_group_formation(
    participants: Iterable[ParticipantLike],
    resources: Iterable[ResourceLike],
    seed: Optional[int] = None,
    tie_break=None,
) -> AlgorithmResult:
    """Convenience wrapper: one run with a seeded or injected tie-break."""
    if tie_break is None:
        tie_break = RandomTieBreak(seed)
    return GroupFormationEngine(tie_break).run(participants, resources)
