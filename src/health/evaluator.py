"""Health evaluator: runs every probe of one kind and aggregates the outcome.

A probe failure is captured under the probe's name and never aborts the rest
of the evaluation. Probes are run once each, without retries; the evaluator
enforces no timeout of its own, so a probe that can block must bound itself
(see ``checks.timeout_check``).
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from .probes import Probe, ProbeFailure, ProbeKind
from .registry import ProbeRegistry

logger = logging.getLogger(__name__)


class AggregateFailure(Exception):
    """One or more probes of a kind failed during an evaluation."""

    def __init__(self, kind: ProbeKind, failures: list[ProbeFailure]) -> None:
        self.kind = kind
        self.failures = failures
        names = ", ".join(f.name for f in failures)
        super().__init__(f"{kind.value} check failed: {names}")


@dataclass
class EvaluationResult:
    """Outcome of a single evaluation. ``results`` maps probe name to its
    error message, or None when the probe passed."""

    kind: ProbeKind
    ok: bool
    results: dict[str, str | None] = field(default_factory=dict)
    duration_ms: float = 0.0

    @property
    def failures(self) -> list[ProbeFailure]:
        return [
            ProbeFailure(name, message)
            for name, message in self.results.items()
            if message is not None
        ]

    def raise_for_status(self) -> None:
        if not self.ok:
            raise AggregateFailure(self.kind, self.failures)

    def to_body(self, full: bool = False) -> dict[str, str]:
        """Response body: failed probes only, or every probe when ``full``."""
        if full:
            return {name: msg if msg is not None else "OK" for name, msg in self.results.items()}
        return {name: msg for name, msg in self.results.items() if msg is not None}


class HealthEvaluator:
    """Evaluates registered probes on demand. Holds no state between calls."""

    def __init__(
        self,
        registry: ProbeRegistry,
        parallel: bool = False,
        max_workers: int = 8,
    ) -> None:
        self.registry = registry
        self.parallel = parallel
        self._max_workers = max_workers

    def evaluate(self, kind: ProbeKind) -> EvaluationResult:
        probes = self.registry.list_probes(kind)
        t0 = time.perf_counter()

        if self.parallel and len(probes) > 1:
            outcomes = self._run_parallel(probes)
        else:
            outcomes = [p.run() for p in probes]

        results: dict[str, str | None] = {}
        for probe, error in zip(probes, outcomes):
            results[probe.name] = error
            if error is not None:
                logger.warning("%s probe %r failed: %s", kind.value, probe.name, error)

        result = EvaluationResult(
            kind=kind,
            ok=all(e is None for e in outcomes),
            results=results,
            duration_ms=round((time.perf_counter() - t0) * 1000, 1),
        )
        logger.debug(
            "Evaluated %d %s probes: %s (%.1fms)",
            len(probes), kind.value, "ok" if result.ok else "failing", result.duration_ms,
        )
        return result

    def _run_parallel(self, probes: list[Probe]) -> list[str | None]:
        workers = min(self._max_workers, len(probes))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="probe") as executor:
            return list(executor.map(Probe.run, probes))
