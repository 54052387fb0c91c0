"""Preview or apply a group allocation from snapshot CSVs.

Usage:
    python -m src.data_pipeline.run_allocation [data_dir] [seed] [--apply]

Examples:
    python -m src.data_pipeline.run_allocation data/snapshots
    python -m src.data_pipeline.run_allocation data/snapshots 42 --apply
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from src.data_pipeline.cleaning import SnapshotCleaner
from src.data_pipeline.config import DEFAULT_MAX_PREFERENCES, SNAPSHOT_DIR
from src.data_pipeline.ingestion import SnapshotIngester
from src.group_formation.engine import GroupFormationEngine
from src.group_formation.group_store import GroupStore
from src.group_formation.models import AlgorithmResult, ValidationError
from src.group_formation.tie_break import RandomTieBreak
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


def run_allocation(
    data_dir: Path | None = None,
    apply: bool = False,
    seed: Optional[int] = None,
    store_dir: Path | None = None,
    max_preferences: Optional[int] = DEFAULT_MAX_PREFERENCES,
) -> AlgorithmResult:
    """Ingest snapshots, allocate, and optionally store the groups.

    Args:
        data_dir: Directory holding ``participants.csv`` and
            ``resources.csv``. Defaults to ``data/snapshots``.
        apply: When True, replace the stored groups with the result.
            When False (preview), nothing is written.
        seed: Tie-break seed. A fresh seed is drawn (and logged) if omitted.
        store_dir: Group store directory. Defaults to ``data/groups``.
        max_preferences: Longest preference list kept per participant.

    Returns:
        The AlgorithmResult of the run.

    Raises:
        FileNotFoundError: If the data directory doesn't exist.
        IngestionError: If the snapshot files cannot be read.
        ValidationError: In apply mode, if there are no resources or the
            engine reports failure. A capacity shortfall is only logged;
            the partial allocation is stored.
    """
    if data_dir is None:
        data_dir = SNAPSHOT_DIR

    if not data_dir.is_dir():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")

    mode = "apply" if apply else "preview"
    logger.info("Starting allocation %s (data: %s)", mode, data_dir)

    # 1. Ingest
    logger.info("Step 1/4: Reading snapshots...")
    raw = SnapshotIngester(data_dir).read_all()

    # 2. Clean
    logger.info("Step 2/4: Cleaning snapshots...")
    snapshot = SnapshotCleaner(max_preferences).clean_all(raw)
    participants = snapshot["participants"]
    resources = snapshot["resources"]

    # 3. Pre-flight + allocate
    logger.info("Step 3/4: Validating and allocating...")
    engine = GroupFormationEngine(RandomTieBreak(seed))
    validation = engine.preview(participants, resources)
    logger.info(
        "Demand %d participants vs. %d slots",
        validation.participants_with_preferences,
        validation.total_capacity,
    )
    if apply:
        if not resources:
            raise ValidationError("No resources provided")
        for error in validation.errors:
            logger.warning("Applying despite pre-flight issue: %s", error)

    result = engine.run(participants, resources)

    # 4. Store
    if apply:
        if not result.success:
            raise ValidationError(result.error)
        logger.info("Step 4/4: Replacing stored groups...")
        GroupStore(store_dir).replace_groups(result)
    else:
        logger.info("Step 4/4: Preview only, nothing stored")

    stats = result.stats
    logger.info("Allocation %s complete", mode)
    logger.info(
        "  Assigned %d/%d (1st=%d, 2nd=%d, 3rd=%d, other=%d), satisfaction %.1f",
        stats.assigned,
        stats.participants_with_preferences,
        stats.first_choice,
        stats.second_choice,
        stats.third_choice,
        stats.other_choice,
        stats.satisfaction_score,
    )

    return result


if __name__ == "__main__":
    setup_logging()

    args = [a for a in sys.argv[1:] if a != "--apply"]
    apply = "--apply" in sys.argv[1:]
    data_dir = Path(args[0]) if len(args) > 0 else None
    seed = int(args[1]) if len(args) > 1 else None

    try:
        result = run_allocation(data_dir, apply=apply, seed=seed)
        print(
            f"Allocation {'applied' if apply else 'previewed'}: "
            f"{result.stats.assigned} assigned, "
            f"{result.stats.unassigned} unassigned "
            f"(seed={result.tie_break_seed})"
        )
    except Exception:
        logger.exception("Allocation failed")
        sys.exit(1)
