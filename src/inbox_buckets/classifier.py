"""Keyword classification of messages into client buckets."""

from __future__ import annotations

from .constants import UNASSIGNED
from .models import MessageRecord
from .rules import RuleSet


def build_haystack(message: MessageRecord, include_snippet: bool = False) -> str:
    """Return the lower-cased text that rule keywords are matched against."""
    parts = [message.subject or "", message.sender or ""]
    if include_snippet:
        parts.append(message.snippet or "")
    return "\n".join(parts).lower()


def classify(message: MessageRecord, ruleset: RuleSet, include_snippet: bool = False) -> str:
    """Return the bucket name of the first rule with a keyword found in the message.

    Falls back to ``UNASSIGNED`` when no rule matches.
    """
    haystack = build_haystack(message, include_snippet=include_snippet)
    for rule in ruleset:
        if any(keyword in haystack for keyword in rule.keywords):
            return rule.name
    return UNASSIGNED
