from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, Field

from memaudit.schemas import Turn

ProbeType = Literal["recall", "hallucination", "conflict", "temporal"]
ReportFormat = Literal["all", "json", "markdown"]

DEFAULT_MODEL = "gpt-4o-mini"


def _default_model() -> str:
    return os.environ.get("MEMAUDIT_MODEL") or DEFAULT_MODEL


def _default_api_base() -> str | None:
    return os.environ.get("OPENAI_BASE_URL") or None


class AuditConfig(BaseModel):
    """Full configuration for one audit run."""

    model: str = Field(default_factory=_default_model)
    api_base: str | None = Field(default_factory=_default_api_base)
    output_dir: str = "./audit-results"
    format: ReportFormat = "all"
    temperature: float = 0.0
    max_tokens: int = 256


class Probe(BaseModel):
    """A synthesized question used to test the agent's memory."""

    id: str
    type: ProbeType
    question: str
    context: list[Turn]
    expected_answer: str
    related_facts: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class ProbeResult(BaseModel):
    """Outcome of running one probe."""

    probe_id: str
    type: ProbeType
    question: str
    expected_answer: str
    actual_answer: str
    is_correct: bool

    model_config = {"frozen": True}


class AuditMetrics(BaseModel):
    recall_accuracy: float
    hallucinated_memory_rate: float  # fraction of hallucination probes answered wrong
    conflict_resolution_accuracy: float
    temporal_accuracy: float

    model_config = {"frozen": True}


class AuditResult(BaseModel):
    """Everything produced by one audit run."""

    dataset_id: str
    timestamp: str
    model: str | None = None
    metrics: AuditMetrics
    probe_results: list[ProbeResult]
