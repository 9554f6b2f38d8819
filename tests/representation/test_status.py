"""Tests for linkstate.representation.status module."""

import pytest

from linkstate.core.errors import InvalidStatusError
from linkstate.representation.status import (
    FETCH_REQUIRED_STATUSES,
    GUARDED_STATUSES,
    Status,
    is_valid_transition,
)


class TestStatus:
    """Status is a closed enumeration with wire values."""

    def test_wire_values(self):
        """Values match the camelCase wire names."""
        assert Status.LOCATION_ONLY.value == "locationOnly"
        assert Status.DELETE_IN_PROGRESS.value == "deleteInProgress"
        assert len(Status) == 8

    def test_parse(self):
        """parse accepts wire values and Status members."""
        assert Status.parse("hydrated") is Status.HYDRATED
        assert Status.parse(Status.STALE) is Status.STALE

    def test_parse_rejects_unknown_value(self):
        """Anything outside the enumeration is rejected."""
        with pytest.raises(InvalidStatusError):
            Status.parse("gone")


class TestStatusSets:
    def test_guarded(self):
        """virtual, deleted, deleteInProgress and forbidden are guarded."""
        assert GUARDED_STATUSES == {
            Status.VIRTUAL,
            Status.DELETED,
            Status.DELETE_IN_PROGRESS,
            Status.FORBIDDEN,
        }

    def test_fetch_required(self):
        """Only locationOnly and stale always fetch."""
        assert FETCH_REQUIRED_STATUSES == {Status.LOCATION_ONLY, Status.STALE}
        assert Status.UNKNOWN not in FETCH_REQUIRED_STATUSES


class TestTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (None, Status.LOCATION_ONLY),
            (None, Status.VIRTUAL),
            (None, Status.UNKNOWN),
            (Status.LOCATION_ONLY, Status.HYDRATED),
            (Status.STALE, Status.HYDRATED),
            (Status.UNKNOWN, Status.HYDRATED),
            (Status.HYDRATED, Status.HYDRATED),
            (Status.HYDRATED, Status.STALE),
            (Status.HYDRATED, Status.FORBIDDEN),
            (Status.HYDRATED, Status.DELETE_IN_PROGRESS),
            (Status.DELETE_IN_PROGRESS, Status.DELETED),
            (Status.DELETE_IN_PROGRESS, Status.UNKNOWN),
        ],
    )
    def test_valid(self, current, target):
        """Lifecycle edges are accepted."""
        assert is_valid_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (None, Status.DELETED),
            (Status.VIRTUAL, Status.HYDRATED),
            (Status.DELETED, Status.HYDRATED),
            (Status.DELETE_IN_PROGRESS, Status.HYDRATED),
        ],
    )
    def test_invalid(self, current, target):
        """Edges outside the lifecycle are reported as invalid."""
        assert not is_valid_transition(current, target)
