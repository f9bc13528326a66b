"""OCPI functional modules.

Only the modules that *serve* exportable objects are listed here. Keeping
the enumeration in the domain layer lets both the CLI and the request
engine share a single source of truth.
"""

from __future__ import annotations

from enum import Enum


class ModuleID(str, Enum):
    """Identifiers of the OCPI functional modules."""

    CDRS = "cdrs"
    CHARGING_PROFILES = "chargingprofiles"
    LOCATIONS = "locations"
    SESSIONS = "sessions"
    TARIFFS = "tariffs"
    TOKENS = "tokens"

    @classmethod
    def from_name(cls, name: str) -> "ModuleID | None":
        """Look a module up by its wire identifier, `None` if unknown."""

        for module in cls:
            if module.value == name:
                return module
        return None

    @classmethod
    def names(cls) -> list[str]:
        return [m.value for m in cls]
