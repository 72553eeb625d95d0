"""Gmail API calls used to list and hydrate messages."""

from __future__ import annotations

import threading

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from .constants import MAX_RESULTS_CEILING, METADATA_HEADERS, USER_ID
from .exceptions import FetchError
from .models import MessageRecord

_REJECTED_STATUSES = (401, 403)

# Everything a list or get call can raise once retries are exhausted.
_CALL_ERRORS = (HttpError, RefreshError, TransportError, httplib2.HttpLib2Error, OSError)


def _is_retryable_http_error(exc: BaseException) -> bool:
    return isinstance(exc, HttpError) and exc.resp.status in (429, 500, 503)


def _to_fetch_error(exc: Exception, action: str) -> FetchError:
    """Translate a Google client exception into a FetchError."""
    if isinstance(exc, RefreshError):
        return FetchError(f"Failed to {action}: stored credentials were rejected", credentials_rejected=True)
    if isinstance(exc, HttpError):
        status = exc.resp.status
        return FetchError(
            f"Failed to {action}: Gmail API returned HTTP {status}",
            credentials_rejected=status in _REJECTED_STATUSES,
        )
    return FetchError(f"Failed to {action}: {type(exc).__name__}: {exc}")


def header_value(headers: list[dict], name: str) -> str:
    """Return the first header called ``name`` (case-insensitive), or an empty string."""
    wanted = name.lower()
    for h in headers:
        if str(h.get("name", "")).lower() == wanted:
            return h.get("value") or ""
    return ""


def parse_message(msg_id: str, response: dict) -> MessageRecord:
    """Build a MessageRecord from a ``users.messages.get`` response."""
    headers = (response.get("payload") or {}).get("headers") or []
    return MessageRecord(
        id=msg_id,
        subject=header_value(headers, "Subject"),
        sender=header_value(headers, "From"),
        date=header_value(headers, "Date"),
        snippet=response.get("snippet") or "",
    )


_retry_transient = retry(
    retry=retry_if_exception(_is_retryable_http_error),
    wait=wait_exponential(multiplier=1, min=1, max=60),
    stop=stop_after_attempt(5),
    reraise=True,
)


class GmailClient:
    """Thin wrapper over the Gmail ``users.messages`` resource.

    httplib2 transports are not thread-safe, so every thread that calls
    into the client gets its own service object built from the shared
    credentials.
    """

    def __init__(self, credentials: Credentials, service_factory=None) -> None:
        self._credentials = credentials
        self._service_factory = service_factory or _build_service
        self._local = threading.local()

    @property
    def service(self) -> Resource:
        service = getattr(self._local, "service", None)
        if service is None:
            service = self._service_factory(self._credentials)
            self._local.service = service
        return service

    def list_message_ids(self, max_results: int) -> list[str]:
        """Return up to ``max_results`` message IDs from the first result page."""
        max_results = min(max_results, MAX_RESULTS_CEILING)
        try:
            resp = self._list(max_results)
        except _CALL_ERRORS as exc:
            raise _to_fetch_error(exc, "list messages") from exc
        return [m["id"] for m in resp.get("messages", [])][:max_results]

    def get_message(self, msg_id: str) -> MessageRecord:
        """Fetch headers and snippet for one message."""
        try:
            resp = self._get(msg_id)
        except _CALL_ERRORS as exc:
            raise _to_fetch_error(exc, f"fetch message {msg_id}") from exc
        return parse_message(msg_id, resp)

    @_retry_transient
    def _list(self, max_results: int) -> dict:
        return (
            self.service.users()
            .messages()
            .list(userId=USER_ID, maxResults=max_results, fields="messages/id")
            .execute()
        )

    @_retry_transient
    def _get(self, msg_id: str) -> dict:
        return (
            self.service.users()
            .messages()
            .get(
                userId=USER_ID,
                id=msg_id,
                format="metadata",
                metadataHeaders=METADATA_HEADERS,
                fields="id,snippet,payload/headers",
            )
            .execute()
        )


def _build_service(credentials: Credentials) -> Resource:
    return build("gmail", "v1", credentials=credentials, cache_discovery=False)
