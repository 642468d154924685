"""
Prometheus metrics for the emoji console.

DRY: Centralize metric definitions and helpers here to avoid scattered
instrumentation across modules. Metrics live in a private registry exposed
through `/metrics`.
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

# ============================================================================
# Counters
# ============================================================================

emoji_artifact_rebuilds_total = Counter(
    "emoji_artifact_rebuilds_total",
    "Artifact rebuilds by artifact and outcome",
    labelnames=("artifact", "status"),
    registry=_registry,
)

emoji_external_fetch_errors_total = Counter(
    "emoji_external_fetch_errors_total",
    "Reference data fetch failures by source and error type",
    labelnames=("source", "error_type"),
    registry=_registry,
)

emoji_display_requests_total = Counter(
    "emoji_display_requests_total",
    "Preview renders by result kind",
    labelnames=("kind",),
    registry=_registry,
)

# ============================================================================
# Histograms
# ============================================================================

emoji_request_duration_seconds = Histogram(
    "emoji_request_duration_seconds",
    "API request duration in seconds by endpoint and status",
    labelnames=("endpoint", "status"),
    buckets=(0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0),
    registry=_registry,
)


# ============================================================================
# Helper Functions
# ============================================================================


def mark_rebuild(artifact: str, status: str) -> None:
    """Mark an artifact rebuild outcome.

    Args:
        artifact: Artifact name (e.g., 'emoji_base', 'set_map:openmoji')
        status: 'success' or 'failed'
    """
    emoji_artifact_rebuilds_total.labels(artifact=artifact, status=status).inc()


def mark_fetch_error(source: str, error_type: str) -> None:
    emoji_external_fetch_errors_total.labels(source=source, error_type=error_type).inc()


def mark_display(kind: str) -> None:
    emoji_display_requests_total.labels(kind=kind).inc()


def observe_request_latency(endpoint: str, status: str, duration_seconds: float) -> None:
    emoji_request_duration_seconds.labels(endpoint=endpoint, status=status).observe(
        duration_seconds
    )


def render_latest() -> tuple[bytes, str]:
    """Render the registry in Prometheus text exposition format."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
