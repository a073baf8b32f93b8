"""Prometheus metrics for the GitHub version provider.

Metrics:
    1. versionwatch_provider_github_rate_limit_remaining (Gauge)
"""
from __future__ import annotations

from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Gauge

from constants import Constants

_default_gauge: Optional[Gauge] = None


def build_rate_limit_gauge(registry: Optional[CollectorRegistry] = None) -> Gauge:
    """Create the rate-limit gauge registered on ``registry``.

    Pass a fresh ``CollectorRegistry`` in tests to keep them isolated from
    the process-wide default registry.
    """
    return Gauge(
        "rate_limit_remaining",
        "The number of requests remaining in the current rate limit window.",
        namespace=Constants.METRICS_NAMESPACE,
        registry=registry if registry is not None else REGISTRY,
    )


def rate_limit_gauge() -> Gauge:
    """Return the gauge registered on the default registry, creating it once."""
    global _default_gauge  # pylint: disable=global-statement
    if _default_gauge is None:
        _default_gauge = build_rate_limit_gauge()
    return _default_gauge
