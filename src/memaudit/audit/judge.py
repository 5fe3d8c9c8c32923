"""Judge whether the model's answer means the same as the expected answer."""

from __future__ import annotations

import litellm

# Room for a short sentence around the "yes"/"no".
JUDGE_MAX_TOKENS = 32

JUDGE_PROMPT = (
    "Do these two statements mean the same thing? Answer only \"yes\" or \"no\".\n\n"
    "Statement 1: \"{expected}\"\n"
    "Statement 2: \"{actual}\""
)


def judge_equivalence(
    expected: str,
    actual: str,
    model: str = "gpt-4o-mini",
    temperature: float = 0.0,
    api_base: str | None = None,
) -> bool:
    """Return True when the judge model says the two answers are equivalent."""
    kwargs = {}
    if api_base:
        kwargs["api_base"] = api_base

    response = litellm.completion(
        model=model,
        messages=[
            {
                "role": "user",
                "content": JUDGE_PROMPT.format(expected=expected, actual=actual),
            },
        ],
        temperature=temperature,
        max_tokens=JUDGE_MAX_TOKENS,
        **kwargs,
    )

    content = response.choices[0].message.content or ""
    return "yes" in content.lower()
