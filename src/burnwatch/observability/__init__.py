"""
Burnwatch - Observability Module

Single observability adapter for the runtime.
All metrics, traces, and structured logs go through this module.

Usage:
    from burnwatch.observability import get_observability

    obs = get_observability()
    obs.increment("fetch.primary.success")

    with obs.trace("ccusage.daily"):
        # traced code here
        pass
"""

from .monitoring import (
    JSONFormatter,
    ObservabilityAdapter,
    get_observability,
    initialize_observability,
    reset_observability,
)

__all__ = [
    "JSONFormatter",
    "ObservabilityAdapter",
    "get_observability",
    "initialize_observability",
    "reset_observability",
]
