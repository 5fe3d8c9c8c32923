"""Load memory datasets from .json and .jsonl files into MemoryDataset objects."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from memaudit.schemas import Conversation, MemoryDataset

logger = logging.getLogger(__name__)


class DatasetLoader(Protocol):
    def can_load(self, path: str | Path) -> bool: ...

    def load(self, path: str | Path) -> MemoryDataset: ...


class JsonLoader:
    """A whole MemoryDataset serialized as one JSON document."""

    def can_load(self, path: str | Path) -> bool:
        return str(path).endswith(".json")

    def load(self, path: str | Path) -> MemoryDataset:
        text = Path(path).read_text(encoding="utf-8")
        return MemoryDataset.model_validate_json(text)


class JsonlLoader:
    """One conversation per line. The file path becomes the dataset id."""

    def can_load(self, path: str | Path) -> bool:
        return str(path).endswith(".jsonl")

    def load(self, path: str | Path) -> MemoryDataset:
        text = Path(path).read_text(encoding="utf-8")
        conversations: list[Conversation] = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{lineno}: invalid JSON ({exc.msg})") from exc
            conversations.append(Conversation.model_validate(record))

        logger.debug("Loaded %d conversations from %s", len(conversations), path)
        return MemoryDataset(id=str(path), conversations=conversations)


LOADERS: list[DatasetLoader] = [JsonLoader(), JsonlLoader()]


def load_dataset(
    path: str | Path,
    loaders: list[DatasetLoader] | None = None,
) -> MemoryDataset:
    """Load a dataset with the first loader that accepts the path.

    Raises ValueError when no loader handles the file extension.
    """
    for loader in loaders if loaders is not None else LOADERS:
        if loader.can_load(path):
            return loader.load(path)
    raise ValueError(f"No loader found for file: {path}")
