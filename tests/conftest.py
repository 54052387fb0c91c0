"""Shared fixtures for the group formation test suite."""

import textwrap

import pytest

from src.group_formation.tie_break import DeterministicTieBreak


# ------------------------------------------------------------------
# Tie-break sources
# ------------------------------------------------------------------

@pytest.fixture
def deterministic():
    return DeterministicTieBreak()


# ------------------------------------------------------------------
# CSV snapshot directory – written fresh per test
# ------------------------------------------------------------------

PARTICIPANTS_CSV = textwrap.dedent("""\
    id,name,pref_1,pref_2,pref_3
    1,Ada,10,20,30
    2,Ben,10,20,
    3,Cy,10,,
    4,Dee,,,
    5,Eve,99,20,
""")

RESOURCES_CSV = textwrap.dedent("""\
    id,title,capacity
    10,Compiler,1
    20,Scheduler,2
    30,Search,
""")


@pytest.fixture
def snapshot_dir(tmp_path):
    """Directory with a small participants/resources export."""
    data_dir = tmp_path / "snapshots"
    data_dir.mkdir()
    (data_dir / "participants.csv").write_text(PARTICIPANTS_CSV)
    (data_dir / "resources.csv").write_text(RESOURCES_CSV)
    return data_dir
