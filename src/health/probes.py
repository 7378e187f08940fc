"""A probe is a named liveness or readiness check."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

# A check succeeds by returning and fails by raising.
Check = Callable[[], None]


class ProbeKind(str, Enum):
    LIVENESS = "liveness"
    READINESS = "readiness"


class ProbeFailure(Exception):
    """A named probe reported a failure."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        self.message = message
        super().__init__(f"{name}: {message}")


@dataclass(frozen=True)
class Probe:
    """A single registered health check."""

    name: str
    kind: ProbeKind
    check: Check

    def run(self) -> str | None:
        """Execute the check. Returns None on success, the error message otherwise."""
        try:
            self.check()
        except Exception as e:
            return str(e) or type(e).__name__
        return None
