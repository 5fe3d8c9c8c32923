"""Answer a probe question from the flattened conversation history."""

from __future__ import annotations

import litellm

from memaudit.schemas import Turn

SYSTEM_PROMPT = (
    "You are being tested on your memory recall. Answer questions based ONLY "
    "on the conversation history provided. Be concise and direct."
)


def format_context(turns: list[Turn]) -> str:
    return "\n".join(f"{t.role.upper()}: {t.content}" for t in turns)


def build_prompt(question: str, context: list[Turn]) -> list[dict[str, str]]:
    """Build the messages list for the litellm completion call."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                f"CONVERSATION HISTORY:\n{format_context(context)}\n\n"
                f"QUESTION: {question}"
            ),
        },
    ]


def generate_answer(
    question: str,
    context: list[Turn],
    model: str = "gpt-4o-mini",
    temperature: float = 0.0,
    max_tokens: int = 256,
    api_base: str | None = None,
) -> str:
    """Ask the model to answer a probe question.

    Returns the answer text, stripped.
    """
    kwargs = {}
    if api_base:
        kwargs["api_base"] = api_base

    response = litellm.completion(
        model=model,
        messages=build_prompt(question, context),
        temperature=temperature,
        max_tokens=max_tokens,
        **kwargs,
    )

    return (response.choices[0].message.content or "").strip()
