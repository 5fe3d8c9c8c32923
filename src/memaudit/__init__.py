"""memaudit — Audit an AI agent's conversational memory with synthesized probes."""

__version__ = "0.1.0"

from memaudit.loader import load_dataset
from memaudit.schemas import Conversation, Fact, MemoryDataset, Turn

__all__ = [
    "Conversation",
    "Fact",
    "MemoryDataset",
    "Turn",
    "load_dataset",
]
