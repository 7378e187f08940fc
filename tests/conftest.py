"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from src.health.evaluator import HealthEvaluator
from src.health.registry import ProbeRegistry
from src.runtime.memstats import MemStats

MIB = 1024 * 1024


@pytest.fixture
def registry() -> ProbeRegistry:
    return ProbeRegistry()


@pytest.fixture
def evaluator(registry: ProbeRegistry) -> HealthEvaluator:
    return HealthEvaluator(registry)


@pytest.fixture
def fake_mem_stats() -> Callable[[int], Callable[[], MemStats]]:
    """Factory for a memory reader reporting a fixed allocation in MiB."""

    def make(alloc_mib: int) -> Callable[[], MemStats]:
        stats = MemStats(alloc=alloc_mib * MIB, total_alloc=alloc_mib * MIB, sys=2 * alloc_mib * MIB, num_gc=3)
        return lambda: stats

    return make
