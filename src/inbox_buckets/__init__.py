"""Gmail Inbox Buckets - group a Gmail inbox into per-client buckets."""

__version__ = "0.1.0"
