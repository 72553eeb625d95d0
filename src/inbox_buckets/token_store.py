"""Local persistence of the OAuth credential bundle."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from google.oauth2.credentials import Credentials

from .constants import SCOPES
from .exceptions import NotAuthorizedError

logger = logging.getLogger(__name__)


class TokenStore:
    """Single-record store for the user's Gmail credentials.

    The record is the JSON written by ``Credentials.to_json()``. Saves
    replace the whole file atomically; there is no merging.
    """

    def __init__(self, token_path: Path | str, scopes: list[str] | None = None) -> None:
        self.token_path = Path(token_path)
        self.scopes = scopes or SCOPES

    def is_authorized(self) -> bool:
        """Return True when a credential record is on disk."""
        return self.token_path.is_file()

    def load(self) -> Credentials:
        """Return the stored credentials.

        Raises:
            NotAuthorizedError: If nothing is stored or the record is unreadable.
        """
        if not self.is_authorized():
            raise NotAuthorizedError()

        try:
            info = json.loads(self.token_path.read_text(encoding="utf-8"))
            if not isinstance(info, dict):
                raise ValueError("token record is not a JSON object")
            return Credentials.from_authorized_user_info(info, self.scopes)
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError is a ValueError; so are missing fields.
            logger.warning("Stored token at %s is unusable: %s", self.token_path, type(exc).__name__)
            raise NotAuthorizedError(
                "Stored token is unreadable. Run the authorization flow again."
            ) from exc

    def save(self, credentials: Credentials) -> None:
        """Persist credentials, replacing any existing record."""
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        payload = credentials.to_json()

        fd, tmp_name = tempfile.mkstemp(
            dir=self.token_path.parent, prefix=f".{self.token_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.token_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("Tokens stored at %s", self.token_path)
