"""Probe generation, execution and scoring."""

from memaudit.audit.executor import execute_probes, run_audit
from memaudit.audit.probes import generate_probes
from memaudit.audit.scorer import compute_metrics

__all__ = ["compute_metrics", "execute_probes", "generate_probes", "run_audit"]
