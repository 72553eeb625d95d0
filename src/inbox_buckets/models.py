"""Data models for Gmail Inbox Buckets."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class Rule:
    """A single bucket rule: messages matching any keyword go to ``name``."""

    name: str
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class MessageRecord:
    """Normalized view of one provider message."""

    id: str
    subject: str = ""
    sender: str = ""  # Full From header value
    date: str = ""
    snippet: str = ""

    def to_dict(self) -> dict[str, str]:
        """Return the record with the provider's field names (``from``, not ``sender``)."""
        return {
            "id": self.id,
            "subject": self.subject,
            "from": self.sender,
            "date": self.date,
            "snippet": self.snippet,
        }


@dataclass(frozen=True)
class ClassifiedMessage:
    """A message paired with the bucket it was assigned to."""

    message: MessageRecord
    bucket: str


@dataclass
class InboxSummary:
    """Message counts per bucket."""

    total: int
    by_bucket: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)
