"""Run probes against an answering adapter, one at a time."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from memaudit.audit.adapter import AnsweringAdapter
from memaudit.audit.probes import generate_probes
from memaudit.audit.schemas import AuditResult, Probe, ProbeResult
from memaudit.audit.scorer import compute_metrics
from memaudit.schemas import MemoryDataset

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def execute_probe(probe: Probe, adapter: AnsweringAdapter) -> ProbeResult:
    actual = adapter.answer(probe.question, probe.context)
    is_correct = adapter.judge_equivalence(probe.expected_answer, actual)

    return ProbeResult(
        probe_id=probe.id,
        type=probe.type,
        question=probe.question,
        expected_answer=probe.expected_answer,
        actual_answer=actual,
        is_correct=is_correct,
    )


def execute_probes(
    probes: list[Probe],
    adapter: AnsweringAdapter,
    on_progress: Optional[ProgressCallback] = None,
) -> list[ProbeResult]:
    """Resolve each probe in order.

    Adapter errors are not caught: the first failure aborts the run.
    """
    results: list[ProbeResult] = []
    total = len(probes)

    for i, probe in enumerate(probes):
        result = execute_probe(probe, adapter)
        results.append(result)
        logger.debug(
            "%s (%s): %s", probe.id, probe.type, "ok" if result.is_correct else "miss"
        )

        if on_progress is not None:
            on_progress(i + 1, total)

    return results


def run_audit(
    dataset: MemoryDataset,
    adapter: AnsweringAdapter,
    model: str | None = None,
    on_progress: Optional[ProgressCallback] = None,
) -> AuditResult:
    """Generate, execute and score every probe for a dataset."""
    probes = generate_probes(dataset)
    results = execute_probes(probes, adapter, on_progress=on_progress)

    return AuditResult(
        dataset_id=dataset.id,
        timestamp=datetime.now(timezone.utc).isoformat(),
        model=model,
        metrics=compute_metrics(results),
        probe_results=results,
    )
