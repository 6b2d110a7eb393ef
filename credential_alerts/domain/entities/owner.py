"""Owner of an application registration."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Owner:
    """A directory object listed as owner of an application."""

    display_name: str
    email: str | None = None
