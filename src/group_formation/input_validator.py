"""Pre-flight checks on participant and resource snapshots."""

import logging
from typing import Sequence

from src.group_formation.models import Participant, Resource, ValidationResult

logger = logging.getLogger(__name__)


def validate_allocation_input(
    participants: Sequence[Participant], resources: Sequence[Resource]
) -> ValidationResult:
    """
    Check whether an allocation run is worth attempting.

    Every rule is evaluated independently, so all problems are reported
    together. Individual preference entries are not inspected here; entries
    naming unknown resources are filtered later during tuple generation.

    Returns:
        ValidationResult with the error messages, the number of participants
        holding a non-empty preference list and the summed resource capacity.
    """
    errors = []

    if not participants:
        errors.append("No participants provided")

    if not resources:
        errors.append("No resources provided")

    with_preferences = sum(1 for p in participants if p.has_preferences)
    if with_preferences == 0:
        errors.append("No participants have submitted preferences")

    total_capacity = sum(r.capacity for r in resources)
    if total_capacity < with_preferences:
        errors.append(
            f"Insufficient capacity: {with_preferences} participants "
            f"but only {total_capacity} slots available"
        )

    for message in errors:
        logger.warning("Allocation pre-flight failed: %s", message)

    return ValidationResult(
        valid=len(errors) == 0,
        errors=tuple(errors),
        participants_with_preferences=with_preferences,
        total_capacity=total_capacity,
    )
