"""Derive memory probes from a dataset's facts."""

from __future__ import annotations

import itertools
import logging
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional

from dateutil import parser as dateutil_parser

from memaudit.audit.schemas import Probe
from memaudit.schemas import Fact, MemoryDataset, Turn

logger = logging.getLogger(__name__)

NOT_MENTIONED = "Not mentioned"
MISSING_FACT_PLACEHOLDER = "an earlier statement that is not in the dataset"

HALLUCINATION_TOPICS = [
    ("pet", "What is the user's pet's name?"),
    ("job", "What is the user's job title?"),
    ("hobby", "What is the user's favorite hobby?"),
]

IdFactory = Callable[[], str]


def _id_factory() -> IdFactory:
    counter: Iterator[int] = itertools.count(1)
    return lambda: f"probe-{next(counter)}"


def recall_question(content: str) -> str:
    """Turn a fact statement into a question about it.

    "User's name is Alice" -> "Based on the conversation history,
    what is the user's name is alice?"
    """
    q = content.lower()
    q = q.replace("user's ", "what is the user's ", 1)
    q = q.replace("user ", "what did the user ", 1)
    return f"Based on the conversation history, {q}?"


def recall_probes(
    facts: list[Fact], context: list[Turn], next_id: IdFactory
) -> list[Probe]:
    # Superseded facts are covered by conflict probes instead.
    return [
        Probe(
            id=next_id(),
            type="recall",
            question=recall_question(fact.content),
            context=context,
            expected_answer=fact.content,
            related_facts=[fact.id],
        )
        for fact in facts
        if not fact.supersedes
    ]


def conflict_probes(
    facts: list[Fact], context: list[Turn], next_id: IdFactory
) -> list[Probe]:
    by_id = {f.id: f for f in reversed(facts)}  # first occurrence wins
    probes: list[Probe] = []

    for fact in facts:
        if not fact.supersedes:
            continue

        old = by_id.get(fact.supersedes)
        if old is None:
            logger.warning(
                "Fact %s supersedes unknown fact %s", fact.id, fact.supersedes
            )
            old_content = MISSING_FACT_PLACEHOLDER
            related = [fact.id]
        else:
            old_content = old.content
            related = [fact.id, old.id]

        probes.append(
            Probe(
                id=next_id(),
                type="conflict",
                question=(
                    f'The user previously mentioned "{old_content}" but later said '
                    f'"{fact.content}". What is the current correct information?'
                ),
                context=context,
                expected_answer=fact.content,
                related_facts=related,
            )
        )

    return probes


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a fact timestamp, ISO-8601 or free-form. Naive values are UTC.

    Returns None when the value is missing or cannot be parsed.
    """
    if not value:
        return None
    try:
        dt = dateutil_parser.isoparse(value)
    except (ValueError, TypeError):
        try:
            dt = dateutil_parser.parse(value)
        except (ValueError, TypeError, OverflowError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def temporal_probes(
    facts: list[Fact], context: list[Turn], next_id: IdFactory
) -> list[Probe]:
    """Compare adjacent timestamped facts in dataset order.

    Only pairs already in chronological order produce a probe; the expected
    answer is always the earlier fact. A pair with an unparsable timestamp
    is never in order.
    """
    timed = [f for f in facts if f.timestamp]
    probes: list[Probe] = []

    for earlier, later in zip(timed, timed[1:]):
        start = parse_timestamp(earlier.timestamp)
        end = parse_timestamp(later.timestamp)
        if start is not None and end is not None and start < end:
            probes.append(
                Probe(
                    id=next_id(),
                    type="temporal",
                    question=(
                        f'Which happened first: "{earlier.content}" '
                        f'or "{later.content}"?'
                    ),
                    context=context,
                    expected_answer=earlier.content,
                    related_facts=[earlier.id, later.id],
                )
            )

    return probes


def hallucination_probes(context: list[Turn], next_id: IdFactory) -> list[Probe]:
    return [
        Probe(
            id=next_id(),
            type="hallucination",
            question=(
                f"Based ONLY on the conversation history, {question} "
                f'If this was never mentioned, say "{NOT_MENTIONED}".'
            ),
            context=context,
            expected_answer=NOT_MENTIONED,
            related_facts=[],
        )
        for _topic, question in HALLUCINATION_TOPICS
    ]


def generate_probes(dataset: MemoryDataset) -> list[Probe]:
    """Generate every probe for a dataset.

    Order is recall, conflict, temporal, hallucination. IDs start at
    ``probe-1`` on every call, so the same dataset always yields the same
    probe set.
    """
    next_id = _id_factory()
    facts = dataset.all_facts()
    context = dataset.all_turns()

    probes = [
        *recall_probes(facts, context, next_id),
        *conflict_probes(facts, context, next_id),
        *temporal_probes(facts, context, next_id),
        *hallucination_probes(context, next_id),
    ]
    logger.info("Generated %d probes for dataset %s", len(probes), dataset.id)
    return probes
