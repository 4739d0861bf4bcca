"""Prometheus metrics for the draft lifecycle."""

from prometheus_client import Counter

draft_transitions_total = Counter(
    "draft_transitions_total",
    "Total draft lifecycle events",
    ["event"],
)

remote_mirror_failures_total = Counter(
    "remote_mirror_failures_total",
    "Total swallowed remote mirror failures",
    ["operation"],
)

notifications_total = Counter(
    "notifications_total",
    "Total notification dispatch attempts",
    ["kind", "outcome"],
)


class PrometheusLifecycleMetrics:
    """Prometheus-based lifecycle metrics implementation."""

    def inc_transition(self, event: str) -> None:
        """Increment lifecycle event counter."""
        draft_transitions_total.labels(event=event).inc()

    def inc_mirror_failure(self, operation: str) -> None:
        """Increment swallowed mirror failure counter."""
        remote_mirror_failures_total.labels(operation=operation).inc()

    def inc_notification(self, kind: str, outcome: str) -> None:
        """Increment notification counter."""
        notifications_total.labels(kind=kind, outcome=outcome).inc()
