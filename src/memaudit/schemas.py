from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["user", "assistant", "system"]
FactCategory = Literal["personal", "preference", "event", "relationship"]


class Turn(BaseModel):
    """A single conversation turn."""

    role: Role
    content: str
    timestamp: Optional[str] = None

    model_config = {"frozen": True}


class Fact(BaseModel):
    """A ground-truth fact established by a conversation."""

    id: str
    content: str
    timestamp: Optional[str] = None
    category: Optional[FactCategory] = None
    supersedes: Optional[str] = None  # id of the fact this one replaces

    model_config = {"frozen": True}


class Conversation(BaseModel):
    id: str
    turns: list[Turn] = Field(default_factory=list)
    facts: list[Fact] = Field(default_factory=list)

    model_config = {"frozen": True}


class MemoryDataset(BaseModel):
    """Top-level unit of work: an ordered collection of conversations."""

    id: str
    conversations: list[Conversation] = Field(default_factory=list)

    model_config = {"frozen": True}

    def all_turns(self) -> list[Turn]:
        """Every conversation's turns, concatenated in dataset order."""
        return [t for c in self.conversations for t in c.turns]

    def all_facts(self) -> list[Fact]:
        """Every conversation's facts, concatenated in dataset order."""
        return [f for c in self.conversations for f in c.facts]

    def find_fact(self, fact_id: str) -> Optional[Fact]:
        for fact in self.all_facts():
            if fact.id == fact_id:
                return fact
        return None

    def supersession_issues(self) -> list[str]:
        """Describe ``supersedes`` references that do not point backwards.

        A fact may only supersede a fact that appears before it in
        enumeration order.
        """
        issues: list[str] = []
        seen: set[str] = set()
        all_ids = {f.id for f in self.all_facts()}

        for fact in self.all_facts():
            ref = fact.supersedes
            if ref:
                if ref not in all_ids:
                    issues.append(f"Fact {fact.id} supersedes unknown fact {ref}")
                elif ref not in seen:
                    issues.append(f"Fact {fact.id} supersedes later fact {ref}")
            seen.add(fact.id)

        return issues
