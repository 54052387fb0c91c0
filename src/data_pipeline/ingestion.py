"""CSV ingestion for participant and resource snapshots.

Handles the two layouts the preference export comes in:
- Ranked columns ``pref_1 .. pref_K`` (blank cells allowed)
- A single ``preferences`` column with ``;``-separated resource ids

The resource catalog may name its capacity column ``max_team_size``.
"""

import logging
import re
from pathlib import Path

import pandas as pd

from src.data_pipeline.config import (
    CAPACITY_ALIASES,
    CAPACITY_COLUMN,
    FILE_NAMES,
    PARTICIPANT_COLUMNS,
    PREFERENCE_COLUMN_PATTERN,
    PREFERENCE_LIST_COLUMN,
    PREFERENCE_SEPARATOR,
    RESOURCE_COLUMNS,
)

logger = logging.getLogger(__name__)

_PREF_PATTERN = re.compile(PREFERENCE_COLUMN_PATTERN)


class IngestionError(Exception):
    """Raised when CSV ingestion fails."""


class SnapshotIngester:
    """Reads participant and resource snapshot CSVs.

    Every cell is read as a string; id normalisation and type conversion are
    left to :class:`~src.data_pipeline.cleaning.SnapshotCleaner`.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _resolve_path(self, file_key: str) -> Path:
        """Build the full file path for a given file key, raising if missing."""
        filepath = self.data_dir / FILE_NAMES[file_key]
        if not filepath.exists():
            raise FileNotFoundError(f"Expected file not found: {filepath}")
        return filepath

    @staticmethod
    def _read_csv(filepath: Path) -> pd.DataFrame:
        df = pd.read_csv(filepath, dtype=str, keep_default_na=False)
        df.columns = [str(c).strip().lower() for c in df.columns]
        for col in df.columns:
            df[col] = df[col].str.strip()
        # Drop rows that are blank in every column
        return df[(df != "").any(axis=1)].reset_index(drop=True)

    @staticmethod
    def _require_columns(df: pd.DataFrame, required: list, filepath: Path):
        missing = [c for c in required if c not in df.columns]
        if missing:
            raise ValueError(f"{filepath.name} is missing columns: {missing}")

    @staticmethod
    def _ranked_preference_columns(df: pd.DataFrame) -> list[str]:
        """Return pref_N columns ordered by N."""
        ranked = []
        for col in df.columns:
            match = _PREF_PATTERN.match(col)
            if match:
                ranked.append((int(match.group(1)), col))
        return [col for _, col in sorted(ranked)]

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------
    def read_participants(self) -> pd.DataFrame:
        """Read the participant snapshot.

        Returns DataFrame with columns:
            id, name, preferences (list of raw resource-id strings, rank order)
        """
        filepath = self._resolve_path("participants")
        logger.info("Reading participants: %s", filepath.name)

        df = self._read_csv(filepath)
        self._require_columns(df, PARTICIPANT_COLUMNS, filepath)

        pref_cols = self._ranked_preference_columns(df)
        if pref_cols:
            # Blank cells are skipped, so later choices move up a rank
            df[PREFERENCE_LIST_COLUMN] = [
                [v for v in row if v != ""]
                for row in df[pref_cols].itertuples(index=False)
            ]
        elif PREFERENCE_LIST_COLUMN in df.columns:
            df[PREFERENCE_LIST_COLUMN] = [
                [v.strip() for v in s.split(PREFERENCE_SEPARATOR) if v.strip()]
                for s in df[PREFERENCE_LIST_COLUMN]
            ]
        else:
            logger.warning("%s has no preference columns", filepath.name)
            df[PREFERENCE_LIST_COLUMN] = [[] for _ in range(len(df))]

        logger.info("Loaded %d participants", len(df))
        return df[PARTICIPANT_COLUMNS + [PREFERENCE_LIST_COLUMN]]

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------
    def read_resources(self) -> pd.DataFrame:
        """Read the resource catalog.

        Returns DataFrame with columns:
            id, title, capacity (raw string, "" when not given)
        """
        filepath = self._resolve_path("resources")
        logger.info("Reading resources: %s", filepath.name)

        df = self._read_csv(filepath)
        self._require_columns(df, RESOURCE_COLUMNS, filepath)

        if CAPACITY_COLUMN not in df.columns:
            alias = next((a for a in CAPACITY_ALIASES if a in df.columns), None)
            if alias:
                df = df.rename(columns={alias: CAPACITY_COLUMN})
            else:
                df[CAPACITY_COLUMN] = ""

        logger.info("Loaded %d resources", len(df))
        return df[RESOURCE_COLUMNS + [CAPACITY_COLUMN]]

    def read_all(self) -> dict[str, pd.DataFrame]:
        """Read both snapshot files.

        Returns:
            dict with keys: 'participants', 'resources'

        Raises:
            IngestionError: if either file cannot be read.
        """
        try:
            return {
                "participants": self.read_participants(),
                "resources": self.read_resources(),
            }
        except Exception as e:
            raise IngestionError(f"Failed to read snapshot files: {e}") from e
