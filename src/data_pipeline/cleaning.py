"""Snapshot cleaning before allocation.

Enforces what the preference-submission store and the project catalog
guarantee to the engine:
- Ids are normalised (integer-looking strings become ints)
- One preference list per participant, one entry per resource id
- Preference lists are no longer than the configured maximum
- Every resource has a positive integer capacity (default 4)
"""

import logging
import re
from typing import Hashable, List, Optional

import pandas as pd

from src.data_pipeline.config import DEFAULT_MAX_PREFERENCES
from src.group_formation.config import DEFAULT_CAPACITY
from src.group_formation.models import Participant, Resource

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"^[+-]?\d+$")


class SnapshotCleaner:
    """Turns raw snapshot DataFrames into immutable engine inputs."""

    def __init__(self, max_preferences: Optional[int] = DEFAULT_MAX_PREFERENCES):
        if max_preferences is not None and max_preferences < 1:
            raise ValueError(
                f"max_preferences must be positive or None, got {max_preferences}"
            )
        self.max_preferences = max_preferences

    # ------------------------------------------------------------------
    # Id helpers
    # ------------------------------------------------------------------
    @staticmethod
    def normalize_id(value) -> Optional[Hashable]:
        """Normalise a raw id cell.

        Examples:
            " 12 " -> 12
            "P-7"  -> "P-7"
            ""     -> None
        """
        if value is None or (isinstance(value, float) and pd.isna(value)):
            return None
        s = str(value).strip()
        if not s:
            return None
        if _INT_PATTERN.match(s):
            return int(s)
        return s

    def clean_preferences(self, raw: List[str], participant_id=None) -> tuple:
        """Normalise ids, drop repeats (first rank wins) and truncate."""
        cleaned = []
        for value in raw:
            resource_id = self.normalize_id(value)
            if resource_id is None or resource_id in cleaned:
                continue
            cleaned.append(resource_id)

        if self.max_preferences is not None and len(cleaned) > self.max_preferences:
            logger.warning(
                "Participant %s listed %d preferences; keeping the first %d",
                participant_id,
                len(cleaned),
                self.max_preferences,
            )
            cleaned = cleaned[: self.max_preferences]

        return tuple(cleaned)

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------
    def clean_participants(self, df: pd.DataFrame) -> List[Participant]:
        """Build participants, skipping rows without an id and duplicate ids."""
        participants = []
        seen = set()

        for row in df.itertuples(index=False):
            participant_id = self.normalize_id(row.id)
            if participant_id is None:
                logger.warning("Skipping participant row with no id: %s", row)
                continue
            if participant_id in seen:
                logger.warning(
                    "Duplicate participant id %r; keeping first", participant_id
                )
                continue
            seen.add(participant_id)

            participants.append(
                Participant(
                    id=participant_id,
                    name=row.name or str(participant_id),
                    preferences=self.clean_preferences(
                        row.preferences, participant_id
                    ),
                )
            )

        logger.info("Cleaned %d participants", len(participants))
        return participants

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------
    @staticmethod
    def parse_capacity(value) -> Optional[int]:
        """Parse a capacity cell; blank or zero means the default.

        Returns None for values that are not positive integers.
        """
        s = "" if value is None else str(value).strip()
        if s == "":
            return DEFAULT_CAPACITY
        try:
            number = float(s)
        except ValueError:
            return None
        if not number.is_integer() or number < 0:
            return None
        return int(number) or DEFAULT_CAPACITY

    def clean_resources(self, df: pd.DataFrame) -> List[Resource]:
        """Build resources, skipping blank ids, duplicates and bad capacities."""
        resources = []
        seen = set()

        for row in df.itertuples(index=False):
            resource_id = self.normalize_id(row.id)
            if resource_id is None:
                logger.warning("Skipping resource row with no id: %s", row)
                continue
            if resource_id in seen:
                logger.warning("Duplicate resource id %r; keeping first", resource_id)
                continue

            capacity = self.parse_capacity(row.capacity)
            if capacity is None:
                logger.warning(
                    "Dropping resource %r with invalid capacity %r",
                    resource_id,
                    row.capacity,
                )
                continue
            seen.add(resource_id)

            resources.append(
                Resource(
                    id=resource_id,
                    title=row.title or str(resource_id),
                    capacity=capacity,
                )
            )

        logger.info(
            "Cleaned %d resources (%d total slots)",
            len(resources),
            sum(r.capacity for r in resources),
        )
        return resources

    def clean_all(self, raw: dict[str, pd.DataFrame]) -> dict:
        """Clean both snapshots.

        Returns:
            dict with keys 'participants' and 'resources' holding lists of
            :class:`Participant` and :class:`Resource`.
        """
        return {
            "participants": self.clean_participants(raw["participants"]),
            "resources": self.clean_resources(raw["resources"]),
        }
