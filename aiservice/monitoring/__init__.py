"""
Monitoring module for observability.
"""

from aiservice.monitoring.langsmith import (
    LangSmithTracer,
    MetricsCollector,
    get_tracer,
    get_metrics,
)

__all__ = [
    "LangSmithTracer",
    "MetricsCollector",
    "get_tracer",
    "get_metrics",
]
