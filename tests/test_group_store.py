"""Tests for the JSON group store."""

import json

import pandas as pd
import pytest

from src.group_formation.engine import run_group_formation
from src.group_formation.group_store import GroupStore, result_to_dict
from src.group_formation.models import Participant, Resource


# ── Helpers ──────────────────────────────────────────────────────────

def _make_result(seed=1):
    participants = [
        Participant(id=1, name="Ada", preferences=(10, 20)),
        Participant(id=2, name="Ben", preferences=(10, 20)),
        Participant(id=3, name="Cy", preferences=(30,)),
    ]
    resources = [
        Resource(id=10, title="Compiler", capacity=1),
        Resource(id=20, title="Scheduler", capacity=1),
    ]
    return run_group_formation(participants, resources, seed=seed)


def _make_failed_result():
    return run_group_formation(
        [Participant(id=1, name="Ada")], [Resource(id=10, title="Compiler")], seed=1
    )


@pytest.fixture
def store(tmp_path):
    return GroupStore(tmp_path / "groups")


# ── Serialization ────────────────────────────────────────────────────

class TestResultToDict:
    def test_is_json_serializable(self):
        data = result_to_dict(_make_result())
        assert json.loads(json.dumps(data)) == data

    def test_structure(self):
        data = result_to_dict(_make_result(seed=5))
        assert data["success"] is True
        assert data["tie_break_seed"] == 5
        assert data["dropped_preferences"] == 1
        assert data["stats"]["assigned"] == 2
        assert data["stats"]["unassigned"] == 1
        assert {g["resource_id"] for g in data["groups"]} == {10, 20}
        assert set(data["assignments"][0]) == {
            "participant_id", "participant_name",
            "resource_id", "resource_title", "rank",
        }

    def test_failed_result(self):
        data = result_to_dict(_make_failed_result())
        assert data["success"] is False
        assert data["error"]
        assert data["groups"] == []


# ── Replace / load ───────────────────────────────────────────────────

class TestReplaceGroups:
    def test_creates_storage_dir(self, tmp_path):
        GroupStore(tmp_path / "nested" / "groups")
        assert (tmp_path / "nested" / "groups").is_dir()

    def test_replace_then_load(self, store):
        result = _make_result()
        path = store.replace_groups(result)
        assert path.exists()

        loaded = store.load_groups()
        assert loaded["stats"]["assigned"] == 2
        assert "saved_at" in loaded

    def test_replace_overwrites_previous_groups(self, store):
        store.replace_groups(_make_result(seed=1))
        second = _make_result(seed=2)
        store.replace_groups(second)
        assert store.load_groups()["tie_break_seed"] == 2

    def test_refuses_failed_result(self, store):
        with pytest.raises(ValueError, match="Refusing to store"):
            store.replace_groups(_make_failed_result())
        assert store.load_groups() is None

    def test_failed_archive_write_keeps_current_groups(self, store, monkeypatch):
        store.replace_groups(_make_result(seed=1))
        write_atomic = store._write_atomic

        def failing_archive(path, record):
            if path.name.startswith("run_"):
                raise OSError("disk full")
            write_atomic(path, record)

        monkeypatch.setattr(store, "_write_atomic", failing_archive)
        with pytest.raises(OSError, match="disk full"):
            store.replace_groups(_make_result(seed=2))

        assert store.load_groups()["tie_break_seed"] == 1

    def test_no_temp_files_left(self, store):
        store.replace_groups(_make_result())
        assert not list(store.storage_dir.glob(".tmp_*"))

    def test_load_missing_returns_none(self, store):
        assert store.load_groups() is None

    def test_load_corrupt_returns_none(self, store):
        store.current_path.write_text("{not json")
        assert store.load_groups() is None


# ── Clear / list ─────────────────────────────────────────────────────

class TestClearAndList:
    def test_clear_groups(self, store):
        store.replace_groups(_make_result())
        assert store.clear_groups() is True
        assert store.load_groups() is None

    def test_clear_nothing(self, store):
        assert store.clear_groups() is False

    def test_clear_keeps_archive(self, store):
        store.replace_groups(_make_result())
        store.clear_groups()
        assert len(store.list_runs()) == 1

    def test_list_runs_newest_first(self, store):
        store.replace_groups(_make_result(seed=1))
        store.replace_groups(_make_result(seed=2))
        runs = store.list_runs()
        assert len(runs) == 2
        assert runs[0]["saved_at"] >= runs[1]["saved_at"]
        assert runs[0]["tie_break_seed"] == 2

    def test_list_runs_skips_corrupt(self, store):
        store.replace_groups(_make_result())
        (store.storage_dir / "run_bad.json").write_text("oops")
        (store.storage_dir / "run_partial.json").write_text("{}")
        assert len(store.list_runs()) == 1


# ── CSV export ───────────────────────────────────────────────────────

class TestExportAssignments:
    def test_export_csv(self, tmp_path):
        path = GroupStore.export_assignments_csv(
            _make_result(), tmp_path / "out" / "assignments.csv"
        )
        df = pd.read_csv(path)
        assert list(df.columns) == [
            "participant_id", "participant_name",
            "resource_id", "resource_title", "rank",
        ]
        assert len(df) == 2
        assert set(df["rank"]) == {1, 2}

    def test_export_empty_result_has_header(self, tmp_path):
        path = GroupStore.export_assignments_csv(
            _make_failed_result(), tmp_path / "empty.csv"
        )
        df = pd.read_csv(path)
        assert df.empty
        assert "participant_id" in df.columns
