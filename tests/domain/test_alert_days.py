"""Tests for AlertDays value object."""

from __future__ import annotations

import pytest

from credential_alerts.domain.exceptions import InvalidAlertDaysError
from credential_alerts.domain.value_objects import DEFAULT_ALERT_DAYS, AlertDays


class TestAlertDays:
    """Tests for AlertDays value object."""

    def test_default_milestones(self) -> None:
        """Default milestones should match the documented set."""
        assert AlertDays().days == frozenset({1, 2, 3, 4, 5, 6, 7, 15, 30, 89})
        assert AlertDays().days == DEFAULT_ALERT_DAYS

    def test_membership_is_exact(self) -> None:
        """Only configured values are members, not values below them."""
        days = AlertDays.of([30])
        assert 30 in days
        assert 29 not in days
        assert 31 not in days

    def test_iterates_sorted(self) -> None:
        """Iteration yields milestones in ascending order."""
        assert list(AlertDays.of([30, 1, 7])) == [1, 7, 30]

    def test_parse_comma_separated(self) -> None:
        """Comma separated strings are parsed, ignoring blanks and spaces."""
        assert AlertDays.parse(" 1, 7,,30 ").days == frozenset({1, 7, 30})

    def test_parse_rejects_non_integer(self) -> None:
        """Non-integer entries are rejected."""
        with pytest.raises(InvalidAlertDaysError, match="Invalid alert day"):
            AlertDays.parse("1,seven")

    def test_empty_set_invalid(self) -> None:
        """At least one milestone is required."""
        with pytest.raises(InvalidAlertDaysError):
            AlertDays(frozenset())

    def test_negative_invalid(self) -> None:
        """Negative milestones are rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            AlertDays.of([-1, 7])

    def test_zero_is_allowed(self) -> None:
        """Zero means the expiry day itself."""
        assert 0 in AlertDays.of([0])

    def test_frozen(self) -> None:
        """Alert days should be immutable."""
        days = AlertDays()
        with pytest.raises(AttributeError):
            days.days = frozenset({1})  # type: ignore[misc]
