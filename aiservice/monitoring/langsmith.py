"""
LangSmith tracing integration for observability.
"""

import logging
import os
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from aiservice.config import settings


logger = logging.getLogger(__name__)


class LangSmithTracer:
    """LangSmith tracing wrapper."""

    def __init__(self):
        self.enabled = False
        self._client = None
        self._initialize()

    def _initialize(self):
        """Initialize LangSmith if configured."""
        if not (settings.LANGSMITH_API_KEY and settings.LANGCHAIN_TRACING_V2):
            logger.debug("LangSmith tracing not configured")
            return

        # Set environment variables for LangChain
        os.environ["LANGCHAIN_TRACING_V2"] = "true"
        os.environ["LANGCHAIN_API_KEY"] = settings.LANGSMITH_API_KEY
        os.environ["LANGCHAIN_PROJECT"] = settings.LANGCHAIN_PROJECT
        os.environ["LANGCHAIN_ENDPOINT"] = settings.LANGCHAIN_ENDPOINT

        from langsmith import Client
        self._client = Client()
        self.enabled = True
        logger.info("LangSmith tracing enabled: %s", settings.LANGCHAIN_PROJECT)

    def trace_run(
        self,
        name: str,
        run_type: str = "chain",
        inputs: Dict[str, Any] = None,
        metadata: Dict[str, Any] = None
    ):
        """
        Context manager for tracing a run.

        Usage:
            with tracer.trace_run("vector_search", inputs={"query": q}) as run:
                docs = ...
                run.set_output(len(docs))
        """
        if not self.enabled:
            return _NoOpContextManager()

        return _TracingContextManager(
            client=self._client,
            name=name,
            run_type=run_type,
            inputs=inputs or {},
            metadata=metadata or {}
        )


class _NoOpContextManager:
    """No-op context manager when tracing is disabled."""

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def set_output(self, output):
        pass


class _TracingContextManager:
    """Context manager for tracing runs."""

    def __init__(self, client, name, run_type, inputs, metadata):
        self.client = client
        self.name = name
        self.run_type = run_type
        self.inputs = inputs
        self.metadata = metadata
        self.run_id = None
        self.outputs = None

    def __enter__(self):
        try:
            import uuid
            self.run_id = uuid.uuid4()
            self.client.create_run(
                id=self.run_id,
                name=self.name,
                run_type=self.run_type,
                inputs=self.inputs,
                start_time=datetime.now(timezone.utc),
                extra={"metadata": self.metadata}
            )
        except Exception as e:
            logger.warning("Failed to create trace run %s: %s", self.name, e)
            self.run_id = None
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.run_id is None:
            return False
        try:
            self.client.update_run(
                self.run_id,
                end_time=datetime.now(timezone.utc),
                outputs={"output": self.outputs} if self.outputs is not None else None,
                error=str(exc_val) if exc_type else None,
            )
        except Exception as e:
            logger.warning("Failed to close trace run %s: %s", self.name, e)
        return False

    def set_output(self, output):
        self.outputs = output


class MetricsCollector:
    """Collects and exposes in-memory counters."""

    COUNTERS = (
        "requests_total",
        "fallbacks",
        "fuzzy_misses",
        "retrieval_misses",
        "provider_errors",
    )

    def __init__(self):
        self._lock = threading.Lock()
        self.metrics = {name: 0 for name in self.COUNTERS}

    def increment(self, metric: str, value: int = 1):
        """Increment a counter metric."""
        with self._lock:
            if metric in self.metrics:
                self.metrics[metric] += value

    def get_metrics(self) -> Dict[str, Any]:
        """Get all metrics."""
        with self._lock:
            metrics = dict(self.metrics)
        total = metrics["requests_total"]
        metrics["fallback_rate"] = metrics["fallbacks"] / total if total else 0.0
        return metrics

    def reset(self):
        with self._lock:
            self.metrics = {name: 0 for name in self.COUNTERS}


# Singleton instances
_tracer: Optional[LangSmithTracer] = None
_metrics: Optional[MetricsCollector] = None


def get_tracer() -> LangSmithTracer:
    """Get singleton tracer."""
    global _tracer
    if _tracer is None:
        _tracer = LangSmithTracer()
    return _tracer


def get_metrics() -> MetricsCollector:
    """Get singleton metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
