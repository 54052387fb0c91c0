"""Per-run slot bookkeeping for resources."""

from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterator, List, Sequence

from src.group_formation.models import GroupMember, Participant, Resource


@dataclass
class ResourceSlot:
    """A resource and the members committed to it so far."""

    resource: Resource
    assigned_members: List[GroupMember] = field(default_factory=list)

    @property
    def has_room(self) -> bool:
        return len(self.assigned_members) < self.resource.capacity


class CapacityTracker:
    """Arena of resource slots indexed by their position in the snapshot.

    Built fresh for every allocation run and owned by that run. A resource id
    listed twice keeps its first position but takes the later entry's title
    and capacity.
    """

    def __init__(self, resources: Sequence[Resource]):
        self._slots: List[ResourceSlot] = []
        self._index: Dict[Hashable, int] = {}
        for resource in resources:
            if resource.id in self._index:
                self._slots[self._index[resource.id]] = ResourceSlot(resource)
            else:
                self._index[resource.id] = len(self._slots)
                self._slots.append(ResourceSlot(resource))

    def __contains__(self, resource_id: Hashable) -> bool:
        return resource_id in self._index

    def __len__(self) -> int:
        return len(self._slots)

    def resource(self, resource_id: Hashable) -> Resource:
        return self._slots[self._index[resource_id]].resource

    def has_room(self, resource_id: Hashable) -> bool:
        """Whether the resource can take another member."""
        return self._slots[self._index[resource_id]].has_room

    def commit(self, resource_id: Hashable, participant: Participant, rank: int):
        """Add a participant to a resource. Caller checks :meth:`has_room` first."""
        slot = self._slots[self._index[resource_id]]
        if not slot.has_room:
            raise ValueError(
                f"Resource {resource_id!r} is full "
                f"({len(slot.assigned_members)}/{slot.resource.capacity})"
            )
        slot.assigned_members.append(
            GroupMember(
                participant_id=participant.id,
                participant_name=participant.name,
                rank=rank,
            )
        )

    def slots(self) -> Iterator[ResourceSlot]:
        """Iterate slots in snapshot order."""
        return iter(self._slots)

    @property
    def total_capacity(self) -> int:
        return sum(slot.resource.capacity for slot in self._slots)
