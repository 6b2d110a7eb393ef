"""Application entity representing an Entra ID app registration."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Application:
    """An Entra ID application registration."""

    id: str
    app_id: str
    display_name: str
