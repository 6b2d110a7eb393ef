"""Per-item outcome used at batch isolation boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ItemResult(Generic[T]):
    """Either a value or the error that prevented producing it."""

    key: str
    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        """True when the item was processed successfully."""
        return self.error is None

    @classmethod
    def success(cls, key: str, value: T) -> ItemResult[T]:
        return cls(key=key, value=value)

    @classmethod
    def failure(cls, key: str, error: BaseException) -> ItemResult[T]:
        return cls(key=key, error=error)
