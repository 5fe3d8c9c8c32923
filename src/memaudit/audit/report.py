"""Output formatting for audit results."""

from __future__ import annotations

from pathlib import Path

from memaudit.audit.schemas import AuditResult, ProbeType

JSON_FILENAME = "results.json"
MARKDOWN_FILENAME = "report.md"

# Section order in the Markdown report.
PROBE_TYPE_ORDER: list[ProbeType] = ["recall", "hallucination", "conflict", "temporal"]


def _pct(value: float) -> str:
    return f"{value * 100:.1f}%"


def render_markdown(result: AuditResult) -> str:
    m = result.metrics
    lines = [
        "# Memory Audit Report",
        "",
        f"**Dataset:** {result.dataset_id}",
        f"**Timestamp:** {result.timestamp}",
        "",
        "## Metrics Summary",
        "",
        "| Metric | Score |",
        "|--------|-------|",
        f"| Recall Accuracy | {_pct(m.recall_accuracy)} |",
        f"| Hallucinated Memory Rate | {_pct(m.hallucinated_memory_rate)} |",
        f"| Conflict Resolution Accuracy | {_pct(m.conflict_resolution_accuracy)} |",
        f"| Temporal Accuracy | {_pct(m.temporal_accuracy)} |",
        "",
        "## Probe Results",
        "",
    ]

    for probe_type in PROBE_TYPE_ORDER:
        typed = [r for r in result.probe_results if r.type == probe_type]
        if not typed:
            continue

        lines.append(f"### {probe_type.capitalize()} Probes")
        lines.append("")
        for r in typed:
            status = "✓" if r.is_correct else "✗"
            lines.append(f"- {status} **Q:** {r.question}")
            lines.append(f"  - Expected: {r.expected_answer}")
            lines.append(f"  - Actual: {r.actual_answer}")
            lines.append("")

    return "\n".join(lines)


def save_json_report(result: AuditResult, output_dir: str | Path) -> Path:
    """Save the full audit result as JSON."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / JSON_FILENAME
    path.write_text(result.model_dump_json(indent=2), encoding="utf-8")
    return path


def save_markdown_report(result: AuditResult, output_dir: str | Path) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / MARKDOWN_FILENAME
    path.write_text(render_markdown(result), encoding="utf-8")
    return path


def generate_reports(
    result: AuditResult,
    output_dir: str | Path,
    fmt: str = "all",
) -> list[Path]:
    """Write the reports selected by ``fmt`` ("all", "json" or "markdown").

    Returns the paths written.
    """
    if fmt not in ("all", "json", "markdown"):
        raise ValueError(f"Unknown report format: {fmt}")

    Path(output_dir).mkdir(parents=True, exist_ok=True)

    paths: list[Path] = []
    if fmt in ("all", "json"):
        paths.append(save_json_report(result, output_dir))
    if fmt in ("all", "markdown"):
        paths.append(save_markdown_report(result, output_dir))
    return paths


def print_audit_summary(result: AuditResult) -> None:
    """Print the four headline metrics."""
    m = result.metrics
    print(f"\n{'=' * 60}")
    print(f"Dataset: {result.dataset_id}")
    if result.model:
        print(f"Model:   {result.model}")
    print(f"Probes:  {len(result.probe_results)}")
    print(f"{'=' * 60}")
    print(f"  Recall Accuracy:          {_pct(m.recall_accuracy)}")
    print(f"  Hallucinated Memory Rate: {_pct(m.hallucinated_memory_rate)}")
    print(f"  Conflict Resolution:      {_pct(m.conflict_resolution_accuracy)}")
    print(f"  Temporal Accuracy:        {_pct(m.temporal_accuracy)}")
