from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Stored group/membership records
GROUPS_DIR = PROJECT_ROOT / "data" / "groups"

# Resource capacity used when the catalog omits one
DEFAULT_CAPACITY = 4

# Satisfaction weights per rank bucket (fixed, not configurable per run)
SATISFACTION_WEIGHTS = {
    "first_choice": 100,
    "second_choice": 66,
    "third_choice": 33,
    "other_choice": 10,
}

# Tie-break key = rank * RANK_SCALE + value in [0, TIE_BREAK_SPAN)
RANK_SCALE = 1000
TIE_BREAK_SPAN = 100

NO_PREFERENCES_ERROR = "No participants have submitted preferences yet"
