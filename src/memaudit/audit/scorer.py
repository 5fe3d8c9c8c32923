"""Aggregate probe results into audit metrics."""

from __future__ import annotations

from memaudit.audit.schemas import AuditMetrics, ProbeResult, ProbeType


def accuracy(results: list[ProbeResult], probe_type: ProbeType) -> float:
    """Fraction of correct results of one type, 0.0 when there are none."""
    typed = [r for r in results if r.type == probe_type]
    if not typed:
        return 0.0
    return sum(1 for r in typed if r.is_correct) / len(typed)


def hallucination_rate(results: list[ProbeResult]) -> float:
    """Fraction of hallucination probes answered incorrectly.

    An incorrect answer means the model made something up instead of saying
    the topic was never mentioned. Lower is better.
    """
    typed = [r for r in results if r.type == "hallucination"]
    if not typed:
        return 0.0
    return sum(1 for r in typed if not r.is_correct) / len(typed)


def compute_metrics(results: list[ProbeResult]) -> AuditMetrics:
    return AuditMetrics(
        recall_accuracy=accuracy(results, "recall"),
        hallucinated_memory_rate=hallucination_rate(results),
        conflict_resolution_accuracy=accuracy(results, "conflict"),
        temporal_accuracy=accuracy(results, "temporal"),
    )
