from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Snapshot exports live here unless a directory is given explicitly
DATA_DIR = PROJECT_ROOT / "data"
SNAPSHOT_DIR = DATA_DIR / "snapshots"

# Snapshot file names
FILE_NAMES = {
    "participants": "participants.csv",
    "resources": "resources.csv",
}

# Required columns per snapshot
PARTICIPANT_COLUMNS = ["id", "name"]
RESOURCE_COLUMNS = ["id", "title"]

# Ranked preferences come either as pref_1..pref_K columns or as one
# "preferences" column separated by PREFERENCE_SEPARATOR.
PREFERENCE_COLUMN_PATTERN = r"^pref_(\d+)$"
PREFERENCE_LIST_COLUMN = "preferences"
PREFERENCE_SEPARATOR = ";"

# Capacity column and the catalog's alternative name for it
CAPACITY_COLUMN = "capacity"
CAPACITY_ALIASES = ["max_team_size"]

# Longest preference list the submission store accepts
DEFAULT_MAX_PREFERENCES = 3
