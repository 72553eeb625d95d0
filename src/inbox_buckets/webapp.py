"""FastAPI front end for Gmail Inbox Buckets.

Routes only parse requests and render responses; every decision lives in
:class:`inbox_buckets.service.InboxService`.

Routes:
    - ``GET /`` and ``GET /health``: liveness
    - ``GET /authorize``: redirect to Google's consent screen
    - ``GET /oauth2callback``: exchange the code and store the token
    - ``GET /emails``: newest messages
    - ``GET /inbox/by-client``: messages grouped by bucket
    - ``GET /inbox/summary``: message counts per bucket
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from .config import AppConfig
from .constants import MAX_RESULTS_CEILING
from .exceptions import ConfigError, ExchangeError, FetchError, NotAuthorizedError
from .service import InboxService

logger = logging.getLogger(__name__)


def get_service(request: Request) -> InboxService:
    """Return the service created with the app; tests replace it via ``dependency_overrides``."""
    return request.app.state.service


def create_app(service: InboxService | None = None) -> FastAPI:
    """Create the FastAPI application around a single InboxService.

    When ``service`` is omitted one is built from the environment, which
    loads the rules file once for the lifetime of the app.
    """
    app = FastAPI(title="Gmail Inbox Buckets")
    app.state.service = service if service is not None else InboxService(AppConfig.from_env())

    @app.exception_handler(NotAuthorizedError)
    def not_authorized(_request: Request, exc: NotAuthorizedError) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={"error": "Not authorized yet. Visit /authorize first.", "authorize_url": "/authorize"},
        )

    @app.exception_handler(FetchError)
    def fetch_failed(_request: Request, exc: FetchError) -> JSONResponse:
        logger.error("Failed to fetch emails: %s", exc)
        if exc.credentials_rejected:
            return JSONResponse(
                status_code=401,
                content={"error": "Stored authorization was rejected. Visit /authorize again.", "authorize_url": "/authorize"},
            )
        return JSONResponse(status_code=502, content={"error": "Failed to fetch emails"})

    @app.exception_handler(ConfigError)
    def config_failed(_request: Request, exc: ConfigError) -> JSONResponse:
        logger.error("Configuration error: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Server is not configured correctly"})

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return "Gmail Inbox Buckets backend is running."

    @app.get("/health")
    def health(svc: InboxService = Depends(get_service)) -> dict[str, Any]:
        """Liveness check; never calls Google."""
        return {"status": "ok", "authorized": svc.is_authorized()}

    @app.get("/authorize")
    def authorize(svc: InboxService = Depends(get_service)) -> RedirectResponse:
        return RedirectResponse(svc.start_authorization(), status_code=302)

    @app.get("/oauth2callback", response_class=PlainTextResponse)
    def oauth2callback(
        code: Optional[str] = None,
        error: Optional[str] = None,
        svc: InboxService = Depends(get_service),
    ) -> PlainTextResponse:
        if error:
            return PlainTextResponse(f"Authorization was not granted: {error}", status_code=400)
        if not code:
            return PlainTextResponse("No code found in callback URL.", status_code=400)
        try:
            svc.complete_authorization(code)
        except ExchangeError:
            return PlainTextResponse(
                "Error retrieving access token. Visit /authorize to try again.", status_code=502
            )
        return PlainTextResponse("Authorization successful. Tokens saved.")

    @app.get("/emails")
    def emails(
        limit: Optional[int] = Query(default=None, ge=1, le=MAX_RESULTS_CEILING),
        svc: InboxService = Depends(get_service),
    ) -> list[dict[str, str]]:
        return [m.to_dict() for m in svc.list_emails(limit)]

    @app.get("/inbox/by-client")
    def by_client(
        limit: Optional[int] = Query(default=None, ge=1, le=MAX_RESULTS_CEILING),
        svc: InboxService = Depends(get_service),
    ) -> dict[str, list[dict[str, str]]]:
        grouped = svc.grouped_inbox(limit)
        return {bucket: [m.to_dict() for m in msgs] for bucket, msgs in grouped.items()}

    @app.get("/inbox/summary")
    def inbox_summary(
        limit: Optional[int] = Query(default=None, ge=1, le=MAX_RESULTS_CEILING),
        svc: InboxService = Depends(get_service),
    ) -> dict[str, Any]:
        summary = svc.inbox_summary(limit)
        return {"total": summary.total, "byClient": summary.by_bucket}

    return app
