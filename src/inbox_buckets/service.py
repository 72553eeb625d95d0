"""Inbox operations exposed to the CLI and web front ends."""

from __future__ import annotations

import logging

from . import auth
from .aggregator import group_by_bucket, summarize
from .auth import ClientConfig
from .config import AppConfig
from .fetcher import MailFetcher
from .models import InboxSummary, MessageRecord
from .rules import RuleSet
from .token_store import TokenStore

logger = logging.getLogger(__name__)


class InboxService:
    """Wires the token store, fetcher and rules together for one user.

    The RuleSet is loaded once, at construction. The OAuth client file is
    read (and its redirect target resolved) the first time it is needed and
    then reused.
    """

    def __init__(
        self,
        config: AppConfig,
        ruleset: RuleSet | None = None,
        token_store: TokenStore | None = None,
        fetcher: MailFetcher | None = None,
        client_config: ClientConfig | None = None,
    ) -> None:
        self.config = config
        self.ruleset = ruleset if ruleset is not None else RuleSet.load(config.rules_path)
        self.token_store = token_store or TokenStore(config.token_path)
        self.fetcher = fetcher or MailFetcher(max_workers=config.max_workers)
        self._client_config = client_config

    @property
    def client_config(self) -> ClientConfig:
        if self._client_config is None:
            self._client_config = auth.load_client_config(
                self.config.credentials_path, self.config.redirect_uri
            )
        return self._client_config

    # --- authorization ---

    def is_authorized(self) -> bool:
        return self.token_store.is_authorized()

    def start_authorization(self, state: str | None = None) -> str:
        """Return the URL the user's browser should be sent to."""
        return auth.build_authorization_url(self.client_config, state=state)

    def complete_authorization(self, code: str | None) -> None:
        """Exchange ``code`` and store the resulting credentials.

        Nothing is written when the exchange fails.
        """
        credentials = auth.exchange_code(self.client_config, code)
        self.token_store.save(credentials)
        logger.info("Authorization completed")

    # --- inbox views ---

    def list_emails(self, limit: int | None = None) -> list[MessageRecord]:
        """Fetch the newest messages.

        Raises:
            NotAuthorizedError: Before any network call, if no token is stored.
            FetchError: If the provider call fails.
        """
        credentials = self.token_store.load()
        return self.fetcher.fetch_messages(credentials, self._limit(limit))

    def grouped_inbox(self, limit: int | None = None) -> dict[str, list[MessageRecord]]:
        return group_by_bucket(
            self.list_emails(limit), self.ruleset, include_snippet=self.config.include_snippet
        )

    def inbox_summary(self, limit: int | None = None) -> InboxSummary:
        return summarize(
            self.list_emails(limit), self.ruleset, include_snippet=self.config.include_snippet
        )

    def _limit(self, limit: int | None) -> int:
        if limit is None:
            return self.config.max_results
        if limit < 1:
            raise ValueError("limit must be at least 1")
        return limit
