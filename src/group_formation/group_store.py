"""Group store - persist allocation results as JSON group records."""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from src.group_formation.config import GROUPS_DIR
from src.group_formation.models import AlgorithmResult

logger = logging.getLogger(__name__)

ASSIGNMENT_COLUMNS = [
    "participant_id",
    "participant_name",
    "resource_id",
    "resource_title",
    "rank",
]


def result_to_dict(result: AlgorithmResult) -> Dict:
    """Convert an AlgorithmResult to a JSON-serializable dict."""
    stats = result.stats
    return {
        "success": result.success,
        "error": result.error,
        "tie_break_seed": result.tie_break_seed,
        "dropped_preferences": result.dropped_preferences,
        "assignments": [
            {
                "participant_id": a.participant_id,
                "participant_name": a.participant_name,
                "resource_id": a.resource_id,
                "resource_title": a.resource_title,
                "rank": a.rank,
            }
            for a in result.assignments
        ],
        "groups": [
            {
                "resource_id": g.resource_id,
                "resource_title": g.resource_title,
                "members": [
                    {
                        "participant_id": m.participant_id,
                        "participant_name": m.participant_name,
                        "rank": m.rank,
                    }
                    for m in g.members
                ],
            }
            for g in result.groups
        ],
        "stats": {
            "total_participants": stats.total_participants,
            "participants_with_preferences": stats.participants_with_preferences,
            "assigned": stats.assigned,
            "unassigned": stats.unassigned,
            "first_choice": stats.first_choice,
            "second_choice": stats.second_choice,
            "third_choice": stats.third_choice,
            "other_choice": stats.other_choice,
            "satisfaction_score": stats.satisfaction_score,
        },
    }


class GroupStore:
    """Keeps the current group/membership records and an archive of runs.

    ``groups.json`` always holds exactly one complete allocation. Replacing it
    goes through a temporary file and ``os.replace`` so readers never see a
    partially written record set.
    """

    CURRENT_FILE = "groups.json"

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = storage_dir or GROUPS_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    @property
    def current_path(self) -> Path:
        return self.storage_dir / self.CURRENT_FILE

    def replace_groups(self, result: AlgorithmResult) -> Path:
        """Replace all stored groups with the ones in *result*.

        Args:
            result: A successful allocation result.

        Returns:
            Path to the current groups file.

        Raises:
            ValueError: If the result is unsuccessful.
        """
        if not result.success:
            raise ValueError(f"Refusing to store failed allocation: {result.error}")

        saved_at = datetime.now(timezone.utc)
        record = {
            "saved_at": saved_at.isoformat(),
            **result_to_dict(result),
        }

        # Archive first: if either write fails the current groups are untouched
        stamp = saved_at.strftime("%Y%m%dT%H%M%S%fZ")
        archive = self.storage_dir / f"run_{stamp}.json"
        self._write_atomic(archive, record)
        self._write_atomic(self.current_path, record)

        logger.info(
            "Stored %d groups (%d members, seed=%s) to %s",
            len(result.groups),
            result.stats.assigned,
            result.tie_break_seed,
            self.current_path,
        )
        return self.current_path

    def load_groups(self) -> Optional[Dict]:
        """Load the current group records.

        Returns:
            The stored record dict, or None when missing or unreadable.
        """
        if not self.current_path.exists():
            return None

        try:
            with open(self.current_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Corrupt groups file %s: %s", self.current_path, e)
            return None

    def clear_groups(self) -> bool:
        """Delete the current group records. Archived runs are kept.

        Returns:
            True if deleted, False if nothing was stored.
        """
        if not self.current_path.exists():
            return False
        self.current_path.unlink()
        logger.info("Cleared stored groups in %s", self.storage_dir)
        return True

    def list_runs(self) -> List[Dict]:
        """List archived runs, most recent first.

        Returns:
            List of dicts with saved_at, path, assigned, unassigned,
            satisfaction_score and tie_break_seed.
        """
        runs = []

        for filepath in self.storage_dir.glob("run_*.json"):
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)

                runs.append(
                    {
                        "saved_at": data["saved_at"],
                        "path": filepath,
                        "assigned": data["stats"]["assigned"],
                        "unassigned": data["stats"]["unassigned"],
                        "satisfaction_score": data["stats"]["satisfaction_score"],
                        "tie_break_seed": data.get("tie_break_seed"),
                    }
                )
            except (json.JSONDecodeError, OSError, KeyError) as e:
                logger.warning("Skipping corrupt run file %s: %s", filepath, e)
                continue

        return sorted(runs, key=lambda x: x["saved_at"], reverse=True)

    @staticmethod
    def export_assignments_csv(result: AlgorithmResult, path: Path) -> Path:
        """Write the assignment table of *result* as CSV."""
        df = pd.DataFrame(
            result_to_dict(result)["assignments"], columns=ASSIGNMENT_COLUMNS
        )
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False)
        logger.info("Exported %d assignments to %s", len(df), path)
        return path

    def _write_atomic(self, path: Path, record: Dict):
        fd, tmp_name = tempfile.mkstemp(
            dir=self.storage_dir, prefix=".tmp_", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2, default=str)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
