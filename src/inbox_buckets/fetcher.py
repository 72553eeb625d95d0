"""Message retrieval: list one page of IDs, then hydrate them in parallel."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from google.oauth2.credentials import Credentials

from .constants import DEFAULT_MAX_WORKERS
from .exceptions import FetchError
from .gmail_client import GmailClient
from .models import MessageRecord

logger = logging.getLogger(__name__)


class MailFetcher:
    """Retrieve the newest messages for the authorized user.

    Hydration fans out over a bounded thread pool and joins before
    returning. Results follow the order of the list call, not the order
    in which hydrations finish. The first failed hydration fails the whole
    fetch; there are no partial results.
    """

    def __init__(
        self,
        client_factory: Callable[[Credentials], GmailClient] = GmailClient,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._client_factory = client_factory
        self.max_workers = max_workers

    def fetch_messages(self, credentials: Credentials, limit: int) -> list[MessageRecord]:
        """Return up to ``limit`` message records in list order.

        Raises:
            FetchError: If listing or any single hydration fails.
        """
        if limit < 1:
            raise ValueError("limit must be at least 1")

        client = self._client_factory(credentials)
        ids = client.list_message_ids(limit)
        logger.debug("Listed %d message IDs", len(ids))
        if not ids:
            return []

        workers = min(self.max_workers, len(ids))
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="hydrate")
        try:
            futures = [pool.submit(client.get_message, msg_id) for msg_id in ids]
            # Collect in submission order so output order matches the listing.
            messages = [future.result() for future in futures]
        except FetchError:
            logger.error("Message hydration failed; cancelling remaining fetches")
            pool.shutdown(wait=True, cancel_futures=True)
            raise
        except Exception as exc:
            pool.shutdown(wait=True, cancel_futures=True)
            raise FetchError(f"Failed to fetch messages: {exc}") from exc
        pool.shutdown(wait=True)

        logger.info("Fetched %d messages", len(messages))
        return messages
