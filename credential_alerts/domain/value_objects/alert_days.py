"""Alert-day milestones value object."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Self

from ..exceptions import InvalidAlertDaysError

DEFAULT_ALERT_DAYS: frozenset[int] = frozenset({1, 2, 3, 4, 5, 6, 7, 15, 30, 89})


@dataclass(frozen=True, slots=True)
class AlertDays:
    """
    Days-remaining values that each trigger exactly one notification.

    Membership is exact: a credential 29 days from expiry is not alerted on
    unless 29 itself is configured.
    """

    days: frozenset[int] = field(default=DEFAULT_ALERT_DAYS)

    def __post_init__(self) -> None:
        """Validate milestones are non-empty and non-negative."""
        if not self.days:
            msg = "Alert days must contain at least one value"
            raise InvalidAlertDaysError(msg)
        negative = sorted(d for d in self.days if d < 0)
        if negative:
            msg = f"Alert days must be non-negative, got: {negative}"
            raise InvalidAlertDaysError(msg)

    def __contains__(self, days_left: object) -> bool:
        return days_left in self.days

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.days))

    def __len__(self) -> int:
        return len(self.days)

    @classmethod
    def of(cls, values: Iterable[int]) -> Self:
        """Build from any iterable of integers."""
        return cls(frozenset(values))

    @classmethod
    def parse(cls, raw: str) -> Self:
        """
        Parse a comma separated list such as ``"1,7,30"``.

        Raises:
            InvalidAlertDaysError: If an entry is not an integer.
        """
        values: set[int] = set()
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                values.add(int(part))
            except ValueError as e:
                msg = f"Invalid alert day: {part!r}"
                raise InvalidAlertDaysError(msg) from e
        return cls(frozenset(values))
