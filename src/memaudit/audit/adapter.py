"""The answering capability the executor talks to."""

from __future__ import annotations

from typing import Protocol

from memaudit.audit.judge import judge_equivalence
from memaudit.audit.responder import generate_answer
from memaudit.audit.schemas import AuditConfig
from memaudit.schemas import Turn


class AnsweringAdapter(Protocol):
    """Anything that can answer a probe and compare two answers."""

    def answer(self, question: str, context: list[Turn]) -> str: ...

    def judge_equivalence(self, expected: str, actual: str) -> bool: ...


class LiteLLMAdapter:
    """Answers and judges with a hosted model through litellm.

    The same model is used for both calls.
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        temperature: float = 0.0,
        max_tokens: int = 256,
        api_base: str | None = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_base = api_base

    @classmethod
    def from_config(cls, config: AuditConfig) -> LiteLLMAdapter:
        return cls(
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            api_base=config.api_base,
        )

    def answer(self, question: str, context: list[Turn]) -> str:
        return generate_answer(
            question,
            context,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            api_base=self.api_base,
        )

    def judge_equivalence(self, expected: str, actual: str) -> bool:
        return judge_equivalence(
            expected,
            actual,
            model=self.model,
            temperature=self.temperature,
            api_base=self.api_base,
        )
