"""Tests for allocation pre-flight validation."""

from src.group_formation.input_validator import validate_allocation_input
from src.group_formation.models import Participant, Resource


# ── Helpers ──────────────────────────────────────────────────────────

def _make_participants(*pref_lists):
    return [
        Participant(id=i, name=f"Name {i}", preferences=prefs)
        for i, prefs in enumerate(pref_lists)
    ]


def _make_resources(*capacities):
    return [
        Resource(id=f"P{i}", title=f"Project {i}", capacity=cap)
        for i, cap in enumerate(capacities)
    ]


# ── Valid input ──────────────────────────────────────────────────────

class TestValidInput:
    def test_valid_when_capacity_covers_demand(self):
        result = validate_allocation_input(
            _make_participants(["P0"], ["P1"]), _make_resources(1, 1)
        )
        assert result.valid is True
        assert result.errors == ()
        assert result.participants_with_preferences == 2
        assert result.total_capacity == 2

    def test_participants_without_preferences_not_counted(self):
        result = validate_allocation_input(
            _make_participants(["P0"], [], []), _make_resources(1)
        )
        assert result.valid is True
        assert result.participants_with_preferences == 1

    def test_unknown_preference_entries_not_rejected(self):
        result = validate_allocation_input(
            _make_participants(["missing"]), _make_resources(1)
        )
        assert result.valid is True


# ── Invalid input ────────────────────────────────────────────────────

class TestInvalidInput:
    def test_no_participants(self):
        result = validate_allocation_input([], _make_resources(2))
        assert result.valid is False
        assert "No participants provided" in result.errors

    def test_no_resources(self):
        result = validate_allocation_input(_make_participants(["P0"]), [])
        assert result.valid is False
        assert "No resources provided" in result.errors

    def test_no_preferences(self):
        result = validate_allocation_input(
            _make_participants([], []), _make_resources(2)
        )
        assert result.valid is False
        assert result.errors == ("No participants have submitted preferences",)

    def test_insufficient_capacity_message(self):
        result = validate_allocation_input(
            _make_participants(["P0"], ["P0"], ["P0"]), _make_resources(2)
        )
        assert result.valid is False
        assert result.errors == (
            "Insufficient capacity: 3 participants but only 2 slots available",
        )

    def test_all_violations_reported(self):
        result = validate_allocation_input([], [])
        assert result.valid is False
        assert result.errors == (
            "No participants provided",
            "No resources provided",
            "No participants have submitted preferences",
        )
        assert result.total_capacity == 0

    def test_no_resources_with_demand_reports_capacity_too(self):
        result = validate_allocation_input(_make_participants(["P0"]), [])
        assert len(result.errors) == 2
        assert result.errors[1].startswith("Insufficient capacity: 1 participants")

    def test_inputs_not_mutated(self):
        participants = _make_participants(["P0"], [])
        resources = _make_resources(1)
        before = (list(participants), list(resources))
        validate_allocation_input(participants, resources)
        assert (participants, resources) == before
