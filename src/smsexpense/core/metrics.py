"""Prometheus metrics for SMS import runs."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

from .models import ExtractedExpense


class MetricsCollector:
    """Prometheus metrics collector for the import pipeline."""

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        self.messages_total = Counter(
            "sms_import_messages_total",
            "Messages scanned by the importer",
            ["outcome"],
            registry=self.registry,
        )

        self.saves_total = Counter(
            "sms_import_saves_total",
            "Persistence attempts for accepted expenses",
            ["status"],
            registry=self.registry,
        )

        self.runs_total = Counter(
            "sms_import_runs_total",
            "Batch import runs",
            ["status"],
            registry=self.registry,
        )

        self.confidence_score = Histogram(
            "sms_import_confidence_score",
            "Confidence scores of extracted candidates",
            buckets=[0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0],
            registry=self.registry,
        )

    def record_candidate(self, expense: ExtractedExpense) -> None:
        """Record a message that produced a candidate."""
        self.messages_total.labels(outcome="candidate").inc()
        self.confidence_score.observe(expense.confidence)

    def record_rejected(self) -> None:
        """Record a message that produced no candidate."""
        self.messages_total.labels(outcome="rejected").inc()

    def record_error(self) -> None:
        """Record a message whose processing raised."""
        self.messages_total.labels(outcome="error").inc()

    def record_save(self, success: bool) -> None:
        """Record one persistence attempt."""
        self.saves_total.labels(status="saved" if success else "failed").inc()

    def record_run(self, success: bool) -> None:
        """Record the outcome of a batch run."""
        self.runs_total.labels(status="success" if success else "failed").inc()

    def export(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)


# Global metrics instance
_global_metrics = None


def get_metrics() -> MetricsCollector:
    """Get the global metrics collector instance."""
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = MetricsCollector()
    return _global_metrics
