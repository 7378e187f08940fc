"""Default probe set for the album service."""

from __future__ import annotations

import logging

from ..config import Settings
from .checks import dns_resolve_check, memory_check, worker_count_check
from .probes import ProbeKind
from .registry import ProbeRegistry

logger = logging.getLogger(__name__)


def build_default_registry(settings: Settings) -> ProbeRegistry:
    """Register the service's liveness and readiness probes."""
    registry = ProbeRegistry()

    # Not alive with more threads than the configured ceiling.
    registry.register_liveness("goroutine-threshold", worker_count_check(settings.worker_threshold))

    # Not ready while the upstream dependency does not resolve.
    registry.register_readiness(
        "upstream-dep-dns",
        dns_resolve_check(settings.dns_hostname, settings.dns_timeout_ms),
    )

    registry.register_liveness("memory-allocation", memory_check(settings.memory_limit_mib))

    logger.info(
        "Health probes registered: liveness=%s readiness=%s",
        registry.names(ProbeKind.LIVENESS),
        registry.names(ProbeKind.READINESS),
    )
    return registry
