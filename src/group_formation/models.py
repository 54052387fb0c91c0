"""Group formation data models - immutable snapshots and run results."""

import re
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Optional, Tuple

from src.group_formation.config import DEFAULT_CAPACITY

_INT_PATTERN = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True)
class Participant:
    """A participant and their ranked resource preferences (rank 1 first)."""

    id: Hashable
    name: str
    preferences: Tuple[Hashable, ...] = ()

    def __post_init__(self):
        # Accept any sequence but store a tuple so the snapshot stays immutable.
        object.__setattr__(self, "preferences", tuple(self.preferences))

    @property
    def has_preferences(self) -> bool:
        return len(self.preferences) > 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Participant":
        """Build from the ``{id, name, preferences}`` collaborator shape."""
        return cls(
            id=data["id"],
            name=data.get("name") or str(data["id"]),
            preferences=tuple(data.get("preferences") or ()),
        )


@dataclass(frozen=True)
class Resource:
    """A resource (project) with a fixed number of member slots."""

    id: Hashable
    title: str
    capacity: int = DEFAULT_CAPACITY

    def __post_init__(self):
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int):
            raise ValueError(
                f"Resource {self.id!r} capacity must be an integer, "
                f"got {self.capacity!r}"
            )
        if self.capacity < 1:
            raise ValueError(
                f"Resource {self.id!r} capacity must be positive, "
                f"got {self.capacity}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        """Build from a catalog row.

        ``capacity`` may also be given as ``max_team_size``. A missing,
        ``None``, blank or zero capacity falls back to ``DEFAULT_CAPACITY``.
        Integer-looking strings are converted; anything else that is not an
        integer is rejected by ``__post_init__``.
        """
        capacity = data.get("capacity")
        if capacity is None:
            capacity = data.get("max_team_size")
        if isinstance(capacity, str):
            capacity = capacity.strip()
            if _INT_PATTERN.match(capacity):
                capacity = int(capacity)
        if capacity is None or capacity == "" or capacity == 0:
            capacity = DEFAULT_CAPACITY
        return cls(
            id=data["id"],
            title=data.get("title") or str(data["id"]),
            capacity=capacity,
        )


@dataclass(frozen=True)
class PreferenceTuple:
    """One candidate claim of a participant on a resource."""

    participant_index: int
    participant_id: Hashable
    resource_id: Hashable
    rank: int
    tie_break_key: float


@dataclass(frozen=True)
class Assignment:
    """A committed placement of one participant on one resource."""

    participant_id: Hashable
    participant_name: str
    resource_id: Hashable
    resource_title: str
    rank: int


@dataclass(frozen=True)
class GroupMember:
    participant_id: Hashable
    participant_name: str
    rank: int


@dataclass(frozen=True)
class Group:
    """All participants placed on one resource."""

    resource_id: Hashable
    resource_title: str
    members: Tuple[GroupMember, ...] = ()


@dataclass(frozen=True)
class AllocationStats:
    """Aggregate outcome counts for one run."""

    total_participants: int = 0
    participants_with_preferences: int = 0
    assigned: int = 0
    unassigned: int = 0
    first_choice: int = 0
    second_choice: int = 0
    third_choice: int = 0
    other_choice: int = 0
    satisfaction_score: float = 0.0


class ValidationError(Exception):
    """Raised when a caller opts to abort on failed pre-flight checks."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of the pre-flight check."""

    valid: bool
    errors: Tuple[str, ...] = ()
    participants_with_preferences: int = 0
    total_capacity: int = 0

    def raise_if_invalid(self):
        if not self.valid:
            raise ValidationError("; ".join(self.errors))


@dataclass(frozen=True)
class AlgorithmResult:
    """Everything one allocation run produces."""

    success: bool
    stats: AllocationStats
    error: Optional[str] = None
    assignments: Tuple[Assignment, ...] = ()
    groups: Tuple[Group, ...] = ()
    tie_break_seed: Optional[int] = None
    dropped_preferences: int = 0
