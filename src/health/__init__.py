"""Health subsystem: probes, registry, evaluator."""

from .evaluator import AggregateFailure, EvaluationResult, HealthEvaluator
from .probes import Probe, ProbeFailure, ProbeKind
from .registry import ProbeRegistry
