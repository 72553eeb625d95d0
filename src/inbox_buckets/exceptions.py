"""Exceptions for Gmail Inbox Buckets."""


class InboxBucketsError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(InboxBucketsError):
    """Raised when rule or client configuration is malformed or incomplete."""


class NotAuthorizedError(InboxBucketsError):
    """Raised when no usable credential bundle is stored.

    Not a transient fault: the authorization flow has to be run first.
    """

    def __init__(self, message: str = "Not authorized yet. Run the authorization flow first."):
        super().__init__(message)


class ExchangeError(InboxBucketsError):
    """Raised when an authorization code is missing, expired or rejected.

    A fresh authorization cycle is required; the exchange is never retried.
    """


class FetchError(InboxBucketsError):
    """Raised when listing or hydrating messages fails.

    ``credentials_rejected`` is set when the provider refused the stored
    credentials (expired, revoked or under-scoped), in which case the caller
    should prompt for re-authorization instead of a plain retry.
    """

    def __init__(self, message: str, credentials_rejected: bool = False):
        self.credentials_rejected = credentials_rejected
        super().__init__(message)
