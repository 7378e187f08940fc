"""Probe registry holding named liveness and readiness probes, kept apart by kind.

Registration is normally finished before the health server starts, but the
mappings are lock-guarded so late registration never races a poll.
"""

from __future__ import annotations

import logging
import threading

from .probes import Check, Probe, ProbeKind

logger = logging.getLogger(__name__)


class ProbeRegistry:
    """Holds probes keyed by name, one mapping per kind."""

    def __init__(self) -> None:
        self._probes: dict[ProbeKind, dict[str, Probe]] = {kind: {} for kind in ProbeKind}
        self._lock = threading.Lock()

    def register(self, kind: ProbeKind, name: str, check: Check) -> None:
        """Insert or replace the probe registered under ``name`` for ``kind``."""
        probe = Probe(name=name, kind=kind, check=check)
        with self._lock:
            replaced = name in self._probes[kind]
            self._probes[kind][name] = probe
        if replaced:
            # Last write wins; duplicate names are allowed silently.
            logger.debug("Replaced %s probe %r", kind.value, name)
        else:
            logger.debug("Registered %s probe %r", kind.value, name)

    def register_liveness(self, name: str, check: Check) -> None:
        self.register(ProbeKind.LIVENESS, name, check)

    def register_readiness(self, name: str, check: Check) -> None:
        self.register(ProbeKind.READINESS, name, check)

    def list_probes(self, kind: ProbeKind) -> list[Probe]:
        """Snapshot of all probes of ``kind`` in registration order."""
        with self._lock:
            return list(self._probes[kind].values())

    def names(self, kind: ProbeKind) -> list[str]:
        with self._lock:
            return list(self._probes[kind])

    def __len__(self) -> int:
        with self._lock:
            return sum(len(m) for m in self._probes.values())
