from __future__ import annotations

import json
from pathlib import Path

import pytest

from memaudit.schemas import MemoryDataset

SAMPLE_DATASET = {
    "id": "test-dataset-1",
    "conversations": [
        {
            "id": "conv-1",
            "turns": [
                {"role": "user", "content": "My name is Alice"},
                {"role": "assistant", "content": "Hello Alice!"},
            ],
            "facts": [
                {"id": "fact-1", "content": "User's name is Alice", "category": "personal"},
            ],
        },
        {
            "id": "conv-2",
            "turns": [
                {
                    "role": "user",
                    "content": "I moved from Seattle to Portland",
                    "timestamp": "2024-02-01T10:00:00Z",
                },
            ],
            "facts": [
                {
                    "id": "fact-2",
                    "content": "User lived in Seattle",
                    "timestamp": "2024-01-01T10:00:00Z",
                },
                {
                    "id": "fact-3",
                    "content": "User lives in Portland",
                    "timestamp": "2024-02-01T10:00:00Z",
                    "supersedes": "fact-2",
                },
            ],
        },
    ],
}


class FakeAdapter:
    """Deterministic answering adapter for tests.

    Answers every question with ``answer_text`` and judges by exact match,
    recording each call.
    """

    def __init__(self, answer_text: str = "Not mentioned") -> None:
        self.answer_text = answer_text
        self.calls: list[tuple[str, str]] = []

    def answer(self, question, context):
        self.calls.append(("answer", question))
        return self.answer_text

    def judge_equivalence(self, expected, actual):
        self.calls.append(("judge", expected))
        return expected == actual


@pytest.fixture
def sample_dataset() -> MemoryDataset:
    return MemoryDataset.model_validate(SAMPLE_DATASET)


@pytest.fixture
def sample_json(tmp_path: Path) -> Path:
    path = tmp_path / "sample-dataset.json"
    path.write_text(json.dumps(SAMPLE_DATASET), encoding="utf-8")
    return path


@pytest.fixture
def sample_jsonl(tmp_path: Path) -> Path:
    path = tmp_path / "sample-dataset.jsonl"
    lines = [json.dumps(c) for c in SAMPLE_DATASET["conversations"]]
    path.write_text("\n".join(lines) + "\n\n", encoding="utf-8")
    return path


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()
