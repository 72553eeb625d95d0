"""OAuth2 authorization helpers for the Gmail API.

The flow is split in two halves so it can run behind a web redirect:
``build_authorization_url`` sends the user to Google, and
``exchange_code`` turns the code Google hands back into credentials.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

import requests
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from .constants import SCOPES
from .exceptions import ConfigError, ExchangeError

logger = logging.getLogger(__name__)

_REQUIRED_CLIENT_KEYS = ("client_id", "client_secret", "auth_uri", "token_uri")


@dataclass(frozen=True)
class ClientConfig:
    """OAuth client registration with its redirect target already chosen."""

    client_type: str  # "web" or "installed"
    client_id: str
    client_secret: str = field(repr=False)
    redirect_uri: str
    auth_uri: str
    token_uri: str
    scopes: tuple[str, ...] = tuple(SCOPES)

    def as_client_secrets(self) -> dict:
        """Return the config in the ``client_secrets.json`` shape the OAuth flow expects."""
        return {
            self.client_type: {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
                "redirect_uris": [self.redirect_uri],
            }
        }


def resolve_redirect_uri(candidates: list[str], override: str | None = None) -> str:
    """Pick the redirect target: explicit override, else the first configured candidate."""
    if override:
        return override
    for uri in candidates:
        if uri:
            return uri
    raise ConfigError("No redirect URI configured. Set REDIRECT_URI or add redirect_uris to the client file.")


def load_client_config(path: Path | str, redirect_override: str | None = None) -> ClientConfig:
    """Load an OAuth client file downloaded from the Google Cloud Console.

    Raises:
        ConfigError: If the file is missing, unparsable or lacks required fields.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(
            f"Credentials file not found at {path}.\n"
            "Download your OAuth web client credentials from the Google Cloud Console "
            "and save them as:\n"
            f"  {path}"
        )

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to read credentials file {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a JSON object with a 'web' or 'installed' section")

    for client_type in ("web", "installed"):
        if client_type in raw:
            section = raw[client_type]
            break
    else:
        raise ConfigError(f"{path}: expected a 'web' or 'installed' section")

    if not isinstance(section, dict):
        raise ConfigError(f"{path}: the '{client_type}' section must be a JSON object")

    missing = [key for key in _REQUIRED_CLIENT_KEYS if not section.get(key)]
    if missing:
        raise ConfigError(f"{path}: missing required field(s): {', '.join(missing)}")

    redirect_uris = section.get("redirect_uris") or []
    if not isinstance(redirect_uris, list) or not all(isinstance(u, str) for u in redirect_uris):
        raise ConfigError(f"{path}: 'redirect_uris' must be a list of strings")

    return ClientConfig(
        client_type=client_type,
        client_id=section["client_id"],
        client_secret=section["client_secret"],
        redirect_uri=resolve_redirect_uri(redirect_uris, redirect_override),
        auth_uri=section["auth_uri"],
        token_uri=section["token_uri"],
    )


def _make_flow(client: ClientConfig) -> Flow:
    # No PKCE: the URL and the exchange run in different requests and nothing
    # carries a code verifier between them.
    return Flow.from_client_config(
        client.as_client_secrets(),
        scopes=list(client.scopes),
        redirect_uri=client.redirect_uri,
        autogenerate_code_verifier=False,
    )


def build_authorization_url(client: ClientConfig, state: str | None = None) -> str:
    """Return the Google consent URL for read-only Gmail access.

    Offline access with a forced consent prompt makes Google issue a
    refresh token every time. Pass ``state`` to pin the CSRF parameter;
    otherwise a random one is generated.
    """
    url, _ = _make_flow(client).authorization_url(
        access_type="offline",
        prompt="consent",
        state=state,
    )
    logger.info("Issued authorization URL for client %s", client.client_id)
    return url


def exchange_code(client: ClientConfig, code: str | None) -> Credentials:
    """Exchange an authorization code for credentials.

    Makes exactly one call to the token endpoint and never retries.

    Raises:
        ExchangeError: If the code is missing, rejected, or the response
            carries no refresh token.
    """
    if not code or not code.strip():
        raise ExchangeError("No authorization code supplied.")

    flow = _make_flow(client)
    try:
        flow.fetch_token(code=code.strip())
    except (OAuth2Error, requests.RequestException, ValueError) as exc:
        logger.error("Error retrieving access token: %s", type(exc).__name__)
        raise ExchangeError(f"Authorization code was rejected: {exc}") from exc
    except Warning as exc:
        # oauthlib raises a bare Warning when the granted scopes differ from the requested ones.
        logger.error("Granted scopes differ from requested scopes")
        raise ExchangeError(str(exc)) from exc

    credentials = flow.credentials
    if not credentials.refresh_token:
        raise ExchangeError(
            "Google did not return a refresh token. Revoke the app's access and authorize again."
        )
    return credentials
