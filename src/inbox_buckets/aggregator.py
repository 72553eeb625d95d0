"""Grouping and counting of fetched messages by bucket."""

from __future__ import annotations

from typing import Iterable

from .classifier import classify
from .models import ClassifiedMessage, InboxSummary, MessageRecord
from .rules import RuleSet


def classify_all(
    messages: Iterable[MessageRecord],
    ruleset: RuleSet,
    include_snippet: bool = False,
) -> list[ClassifiedMessage]:
    """Pair every message with its bucket, keeping input order."""
    return [
        ClassifiedMessage(message=msg, bucket=classify(msg, ruleset, include_snippet=include_snippet))
        for msg in messages
    ]


def group_by_bucket(
    messages: Iterable[MessageRecord],
    ruleset: RuleSet,
    include_snippet: bool = False,
) -> dict[str, list[MessageRecord]]:
    """Partition messages by bucket; within a bucket, input order is kept."""
    grouped: dict[str, list[MessageRecord]] = {}
    for item in classify_all(messages, ruleset, include_snippet=include_snippet):
        grouped.setdefault(item.bucket, []).append(item.message)
    return grouped


def summarize(
    messages: Iterable[MessageRecord],
    ruleset: RuleSet,
    include_snippet: bool = False,
) -> InboxSummary:
    """Count messages per bucket."""
    messages = list(messages)
    counts: dict[str, int] = {}
    for item in classify_all(messages, ruleset, include_snippet=include_snippet):
        counts[item.bucket] = counts.get(item.bucket, 0) + 1
    return InboxSummary(total=len(messages), by_bucket=counts)
