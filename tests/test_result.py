#!/usr/bin/env python3
"""Tests for UrgencyResult dataclass."""

import dataclasses

import pytest

from urgency import NOT_TRACKED, UrgencyLevel, UrgencyResult


class TestUrgencyResult:
    """Tests for UrgencyResult properties."""

    def test_is_immutable(self):
        result = UrgencyResult(UrgencyLevel.OK, 90, "90 days", "ok")
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.remaining = 10

    def test_is_tracked(self):
        assert UrgencyResult(UrgencyLevel.OK, 90, "90 days", "ok").is_tracked
        assert not UrgencyResult(UrgencyLevel.OK, NOT_TRACKED, "not set", "ok").is_tracked

    def test_is_due(self):
        """Anything other than OK needs attention."""
        assert UrgencyResult(UrgencyLevel.SOON, 45, "45 days", "soon").is_due
        assert UrgencyResult(UrgencyLevel.EXPIRED, -1, "expired 1 days ago", "expired").is_due
        assert not UrgencyResult(UrgencyLevel.OK, 90, "90 days", "ok").is_due

    def test_not_tracked_is_an_integer_maximum(self):
        assert isinstance(NOT_TRACKED, int)
        assert NOT_TRACKED > 10**12
