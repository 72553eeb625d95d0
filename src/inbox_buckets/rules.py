"""Loading of keyword rules that map messages to client buckets."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator

from .exceptions import ConfigError
from .models import Rule

logger = logging.getLogger(__name__)


def _normalize(rule: Rule) -> Rule:
    if not rule.name or not rule.name.strip():
        raise ConfigError("Rule names must be non-empty")
    keywords = tuple(k.strip().lower() for k in rule.keywords if k.strip())
    if keywords == rule.keywords:
        return rule
    return Rule(name=rule.name, keywords=keywords)


class RuleSet:
    """Ordered, read-only collection of bucket rules.

    Order matters: the first rule with a matching keyword wins.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: tuple[Rule, ...] = tuple(_normalize(rule) for rule in rules)

    @classmethod
    def from_entries(cls, entries: object) -> RuleSet:
        """Build a RuleSet from decoded JSON (a list of ``{name, keywords}`` objects).

        Bucket names are kept as written. Keywords are lower-cased and
        stripped once, so matching never has to normalize them again.
        Blank keywords are dropped.

        Raises:
            ConfigError: If the structure is not a list of valid entries.
        """
        if not isinstance(entries, list):
            raise ConfigError(
                f"Rules must be a JSON array of {{name, keywords}} objects, got {type(entries).__name__}"
            )

        rules: list[Rule] = []
        for idx, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ConfigError(f"Rule #{idx} must be an object, got {type(entry).__name__}")

            name = entry.get("name")
            if not isinstance(name, str) or not name.strip():
                raise ConfigError(f"Rule #{idx} needs a non-empty string 'name'")

            keywords = entry.get("keywords", [])
            if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
                raise ConfigError(f"Rule #{idx} ({name!r}): 'keywords' must be a list of strings")

            rules.append(Rule(name=name, keywords=tuple(keywords)))

        return cls(rules)

    @classmethod
    def load(cls, path: Path | str | None) -> RuleSet:
        """Load rules from a JSON file.

        A missing file (or no path at all) yields an empty RuleSet and a
        warning; every message then lands in the unassigned bucket. A file
        that exists but cannot be parsed raises ConfigError.
        """
        if path is None:
            logger.warning("No rules file configured; all messages will be unassigned")
            return cls()

        path = Path(path)
        if not path.exists():
            logger.warning("Rules file %s not found; all messages will be unassigned", path)
            return cls()

        try:
            entries = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse rules file {path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Failed to read rules file {path}: {exc}") from exc

        try:
            ruleset = cls.from_entries(entries)
        except ConfigError as exc:
            raise ConfigError(f"{path}: {exc}") from exc

        logger.info("Loaded %d rules from %s", len(ruleset), path)
        return ruleset

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({[r.name for r in self._rules]!r})"

    @property
    def bucket_names(self) -> list[str]:
        return [r.name for r in self._rules]
