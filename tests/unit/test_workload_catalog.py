"""
Unit tests for workload profiles and the catalog.
"""

import dataclasses

import pytest

from gvlsim.workload import (
    DEFAULT_CATALOG,
    Phase,
    PhaseKind,
    RequestProfile,
    UnknownProfile,
    WorkloadCatalog,
    lookup,
)


class TestPhase:
    """Test phase construction rules."""

    def test_valid_phase(self):
        phase = Phase(PhaseKind.CPU, 5)
        assert phase.duration == 5
        assert phase.needs_lock

    def test_io_phase_does_not_need_lock(self):
        assert not Phase(PhaseKind.IO, 1).needs_lock

    @pytest.mark.parametrize("duration", [0, -3])
    def test_non_positive_duration_rejected(self, duration):
        with pytest.raises(ValueError, match="positive"):
            Phase(PhaseKind.CPU, duration)

    @pytest.mark.parametrize("duration", [1.5, "10", True])
    def test_non_integer_duration_rejected(self, duration):
        with pytest.raises(ValueError, match="integer"):
            Phase(PhaseKind.IO, duration)

    def test_kind_must_be_enum(self):
        with pytest.raises(ValueError):
            Phase("cpu", 5)

    def test_immutable(self):
        phase = Phase(PhaseKind.CPU, 5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            phase.duration = 6


class TestRequestProfile:
    """Test profile construction and derived durations."""

    def test_durations(self):
        profile = RequestProfile(
            "p", "Profile",
            [Phase(PhaseKind.CPU, 3), Phase(PhaseKind.IO, 4), Phase(PhaseKind.CPU, 5)],
        )
        assert profile.total_duration == 12
        assert profile.cpu_duration == 8
        assert profile.io_duration == 4

    def test_phases_stored_as_tuple(self):
        profile = RequestProfile("p", "Profile", [Phase(PhaseKind.CPU, 1)])
        assert isinstance(profile.phases, tuple)

    def test_empty_profile_rejected(self):
        with pytest.raises(ValueError, match="at least one phase"):
            RequestProfile("empty", "Empty", [])


class TestWorkloadCatalog:
    """Test catalog lookup and validation."""

    def test_default_profiles_present(self):
        assert DEFAULT_CATALOG.keys() == ["low-io", "heavy-io", "cpu-bound"]

    def test_low_io_phases(self):
        profile = lookup("low-io")
        assert [(p.kind, p.duration) for p in profile.phases] == [
            (PhaseKind.CPU, 20),
            (PhaseKind.IO, 10),
            (PhaseKind.CPU, 20),
            (PhaseKind.IO, 10),
            (PhaseKind.CPU, 20),
            (PhaseKind.IO, 10),
            (PhaseKind.CPU, 30),
        ]

    def test_heavy_io_phases(self):
        profile = lookup("heavy-io")
        assert [(p.kind, p.duration) for p in profile.phases] == [
            (PhaseKind.CPU, 10),
            (PhaseKind.IO, 500),
            (PhaseKind.CPU, 50),
        ]

    def test_unknown_key(self):
        with pytest.raises(UnknownProfile) as exc_info:
            lookup("bogus")

        assert exc_info.value.unknown_keys == ["bogus"]
        assert exc_info.value.valid_keys == DEFAULT_CATALOG.keys()
        assert "Valid profiles are: low-io, heavy-io, cpu-bound" in str(exc_info.value)

    def test_unknown_profile_is_value_error(self):
        with pytest.raises(ValueError):
            lookup("bogus")

    def test_unhashable_key(self):
        with pytest.raises(UnknownProfile, match=r"\['low-io'\]") as exc_info:
            lookup(["low-io"])
        assert exc_info.value.unknown_keys == [["low-io"]]

    def test_validate_keys_unhashable(self):
        with pytest.raises(UnknownProfile) as exc_info:
            DEFAULT_CATALOG.validate_keys(["low-io", {"k": 1}, 7, {"k": 1}])
        assert exc_info.value.unknown_keys == [{"k": 1}, 7]
        assert "Invalid profile key(s): {'k': 1}, 7." in str(exc_info.value)

    def test_unhashable_not_contained(self):
        assert ["low-io"] not in DEFAULT_CATALOG

    def test_validate_keys(self):
        DEFAULT_CATALOG.validate_keys(["low-io", "heavy-io"])
        with pytest.raises(UnknownProfile) as exc_info:
            DEFAULT_CATALOG.validate_keys(["x", "low-io", "y", "x"])
        assert exc_info.value.unknown_keys == ["x", "y"]

    def test_duplicate_keys_rejected(self):
        profile = RequestProfile("dup", "Dup", [Phase(PhaseKind.CPU, 1)])
        with pytest.raises(ValueError, match="Duplicate"):
            WorkloadCatalog([profile, profile])

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_CATALOG._profiles["new"] = lookup("low-io")

    def test_container_protocol(self):
        assert "low-io" in DEFAULT_CATALOG
        assert "bogus" not in DEFAULT_CATALOG
        assert len(DEFAULT_CATALOG) == 3
        assert list(DEFAULT_CATALOG) == DEFAULT_CATALOG.keys()
