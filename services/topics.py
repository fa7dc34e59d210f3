"""Keyword topic tagging for questions without an explicit topic."""
from __future__ import annotations

from typing import Optional, Sequence, Tuple

from agents.types import DynamicQuestion

TOPIC_KEYWORDS: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("climate", ("climate", "environment")),
    ("economy", ("economic", "jobs")),
    ("immigration", ("immigration", "asylum")),
    ("housing", ("housing", "rent")),
    ("healthcare", ("healthcare", "medical")),
    ("education", ("education", "school")),
    ("security", ("security", "crime")),
)


def extract_topic(question: DynamicQuestion) -> Optional[str]:
    """Explicit topic wins; otherwise the first keyword hit in the question text."""

    if question.topic:
        return question.topic
    text = question.question.lower()
    for topic, keywords in TOPIC_KEYWORDS:
        if any(word in text for word in keywords):
            return topic
    return None


__all__ = ["TOPIC_KEYWORDS", "extract_topic"]
