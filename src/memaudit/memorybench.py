"""Convert THUIR/MemoryBench Arrow shards into memaudit datasets.

The Locomo-0 test split ships as a single Arrow IPC file on Hugging Face.
Each row holds one question with its dialogue context, either as a JSON
list of messages or embedded in the free-form ``input_prompt``.

Usage:
    memaudit fetch-memorybench --samples 5
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pyarrow as pa
import pyarrow.ipc
import requests

from memaudit.schemas import Conversation, Fact, MemoryDataset, Turn

logger = logging.getLogger(__name__)

HF_URL = (
    "https://huggingface.co/datasets/THUIR/MemoryBench/resolve/main/"
    "dataset/Locomo-0/test/data-00000-of-00001.arrow"
)
ARROW_FILENAME = "locomo-0-test.arrow"
OUTPUT_FILENAME = "memorybench-locomo.json"
PROVENANCE_FILENAME = "PROVENANCE.json"

CITATION = """@article{ai2025memorybench,
  title={MemoryBench: A Benchmark for Memory and Continual Learning in LLM Systems},
  author={Ai, Qingyao and Tang, Yichen and Wang, Changyue and Long, Jianming and Su, Weihang and Liu, Yiqun},
  journal={arXiv preprint arXiv:2510.17281},
  year={2025}
}"""

# "Speaker Alice says : hello there Speaker Bob says : hi"
_SPEAKER_RE = re.compile(
    r"Speaker (\w+)says\s*:\s*(.*?)(?=Speaker \w+says\s*:|\Z)",
    re.DOTALL,
)


def parse_dialog(dialog: str | None) -> list[Turn]:
    """Parse a JSON list of ``{"role", "content"}`` messages.

    Anything that is not a user message is treated as the assistant.
    Returns [] for missing or malformed input.
    """
    if not dialog:
        return []

    try:
        parsed = json.loads(dialog)
    except json.JSONDecodeError:
        return []
    if not isinstance(parsed, list):
        return []

    turns: list[Turn] = []
    for item in parsed:
        if not isinstance(item, dict):
            continue
        role = "user" if item.get("role") == "user" else "assistant"
        turns.append(Turn(role=role, content=str(item.get("content") or "")))
    return turns


def extract_conversation_from_prompt(input_prompt: str) -> list[Turn]:
    """Recover dialogue turns from the speaker markers in a prompt.

    All participants become user turns, prefixed with the speaker name.
    """
    turns: list[Turn] = []
    for match in _SPEAKER_RE.finditer(input_prompt or ""):
        speaker = match.group(1)
        content = match.group(2).strip()
        if content:
            turns.append(Turn(role="user", content=f"{speaker}: {content}"))
    return turns


def extract_facts(info: dict[str, Any], conv_id: str) -> list[Fact]:
    """One fact per evidence item, plus the golden answer."""
    facts: list[Fact] = []

    evidence = info.get("evidence")
    if isinstance(evidence, list):
        for idx, ev in enumerate(evidence, start=1):
            text = ev.get("text") if isinstance(ev, dict) else None
            if text is None:
                continue
            facts.append(
                Fact(id=f"{conv_id}-fact-{idx}", content=str(text), category="event")
            )

    golden = info.get("golden_answer")
    if golden:
        if isinstance(golden, dict):
            # Multiple choice: keep every option.
            content = " | ".join(str(v) for v in golden.values())
        else:
            content = str(golden)
        facts.append(Fact(id=f"{conv_id}-golden", content=content, category="personal"))

    return facts


def _parse_info(raw: Any, conv_id: str) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    try:
        info = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("%s: unparsable info field, using empty defaults", conv_id)
        info = None
    if not isinstance(info, dict):
        info = {"golden_answer": "", "category": 0, "evidence": []}
    return info


def transform_row(row: dict[str, Any], index: int) -> Conversation:
    """Turn one MemoryBench row into a Conversation."""
    conv_id = f"memorybench-{row.get('dataset_name')}-{index}"
    info = _parse_info(row.get("info"), conv_id)

    turns = parse_dialog(row.get("dialog_embedder"))
    if not turns:
        turns = parse_dialog(row.get("dialog_bm25_dialog"))
    if not turns:
        turns = extract_conversation_from_prompt(row.get("input_prompt") or "")

    question = row.get("origin_question")
    if question:
        turns.append(Turn(role="system", content=f"Question: {question}"))

    return Conversation(id=conv_id, turns=turns, facts=extract_facts(info, conv_id))


def read_arrow_table(path: str | Path) -> pa.Table:
    """Read an Arrow IPC file in either stream or file format."""
    with pa.OSFile(str(path), "rb") as source:
        is_file_format = source.read(6) == b"ARROW1"
        source.seek(0)
        if is_file_format:
            return pa.ipc.open_file(source).read_all()
        return pa.ipc.open_stream(source).read_all()


def load_memorybench_arrow(arrow_path: str | Path) -> MemoryDataset:
    """Load a MemoryBench Arrow file as a MemoryDataset.

    Rows with neither turns nor facts are dropped.
    """
    arrow_path = Path(arrow_path)
    table = read_arrow_table(arrow_path)

    conversations: list[Conversation] = []
    for i, row in enumerate(table.to_pylist()):
        conv = transform_row(row, i)
        if conv.turns or conv.facts:
            conversations.append(conv)

    stem = arrow_path.name.replace(".arrow", "", 1) or "unknown"
    return MemoryDataset(id=f"memorybench-{stem}", conversations=conversations)


def sample_dataset(dataset: MemoryDataset, max_samples: int | None) -> MemoryDataset:
    """Keep the first ``max_samples`` conversations, tagging the id."""
    if max_samples and len(dataset.conversations) > max_samples:
        return MemoryDataset(
            id=f"{dataset.id}-sampled-{max_samples}",
            conversations=dataset.conversations[:max_samples],
        )
    return dataset


def write_dataset(dataset: MemoryDataset, output_path: str | Path) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        dataset.model_dump_json(indent=2, exclude_none=True), encoding="utf-8"
    )
    return output_path


def transform_memorybench_to_json(
    arrow_path: str | Path,
    output_path: str | Path,
    max_samples: int | None = None,
) -> MemoryDataset:
    """Convert an Arrow file and write it as a memaudit JSON dataset."""
    dataset = sample_dataset(load_memorybench_arrow(arrow_path), max_samples)
    write_dataset(dataset, output_path)
    return dataset


def download(url: str, dest: Path, timeout: float = 60.0) -> Path:
    dest.parent.mkdir(parents=True, exist_ok=True)
    partial = dest.with_name(dest.name + ".part")
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with open(partial, "wb") as f:
                for block in response.iter_content(chunk_size=1 << 16):
                    f.write(block)
    except Exception:
        partial.unlink(missing_ok=True)
        raise
    partial.replace(dest)
    return dest


def build_provenance(dataset: MemoryDataset, original_total: int) -> dict[str, Any]:
    return {
        "source": "THUIR/MemoryBench",
        "subset": "Locomo-0",
        "split": "test",
        "huggingface_url": "https://huggingface.co/datasets/THUIR/MemoryBench",
        "paper": "https://arxiv.org/abs/2510.17281",
        "license": "MIT",
        "fetched_at": datetime.now(timezone.utc).isoformat(),
        "samples": len(dataset.conversations),
        "original_total": original_total,
        "citation": CITATION,
    }


def fetch_memorybench(
    data_dir: str | Path = "data/real",
    max_samples: int | None = 5,
    url: str = HF_URL,
) -> MemoryDataset:
    """Download, convert and record provenance for the Locomo-0 split.

    The raw Arrow file is cached under ``<data_dir>/raw`` and only
    downloaded when missing.
    """
    data_dir = Path(data_dir)
    arrow_path = data_dir / "raw" / ARROW_FILENAME

    if arrow_path.exists():
        print("Arrow file already exists, skipping download.")
    else:
        print(f"Downloading Locomo-0 test split from {url}...")
        download(url, arrow_path)
        print("Download complete.")

    print(f"Transforming to memaudit format (max {max_samples} samples)...")
    full = load_memorybench_arrow(arrow_path)
    dataset = sample_dataset(full, max_samples)
    write_dataset(dataset, data_dir / OUTPUT_FILENAME)

    provenance = build_provenance(dataset, len(full.conversations))
    (data_dir / PROVENANCE_FILENAME).write_text(
        json.dumps(provenance, indent=2), encoding="utf-8"
    )
    return dataset
