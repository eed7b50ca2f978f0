"""
Defines Prometheus metrics for lookups and extraction.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test reloads, multiple entry points) must not try
# to register a collector name twice.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "extractions_total": Counter(
            "zestimator_extractions_total",
            "Successful valuation extractions by data source",
            ["source"],
        ),
        "failures_total": Counter(
            "zestimator_failures_total",
            "User-visible failures by kind",
            ["kind"],
        ),
        "fetch_latency_seconds": Histogram(
            "zestimator_fetch_latency_seconds",
            "Time taken to fetch a page",
            buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0],
        ),
        "fetch_responses_total": Counter(
            "zestimator_fetch_responses_total",
            "HTTP responses by status class",
            ["status_class"],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


def record_failure(kind: str) -> None:
    """Count a user-visible failure."""
    METRICS["failures_total"].labels(kind=kind).inc()
