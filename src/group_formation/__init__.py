from src.group_formation.capacity_tracker import CapacityTracker
from src.group_formation.engine import GroupFormationEngine, run_group_formation
from src.group_formation.group_store import GroupStore, result_to_dict
from src.group_formation.input_validator import validate_allocation_input
from src.group_formation.models import (
    AlgorithmResult,
    AllocationStats,
    Assignment,
    Group,
    GroupMember,
    Participant,
    PreferenceTuple,
    Resource,
    ValidationError,
    ValidationResult,
)
from src.group_formation.tie_break import DeterministicTieBreak, RandomTieBreak

__all__ = [
    "AlgorithmResult",
    "AllocationStats",
    "Assignment",
    "CapacityTracker",
    "DeterministicTieBreak",
    "Group",
    "GroupFormationEngine",
    "GroupMember",
    "GroupStore",
    "Participant",
    "PreferenceTuple",
    "RandomTieBreak",
    "Resource",
    "ValidationError",
    "ValidationResult",
    "result_to_dict",
    "run_group_formation",
    "validate_allocation_input",
]
