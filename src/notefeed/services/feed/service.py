"""HTTP surface of the feed: a FastAPI app serving one rendered HTML page.

Every ``GET /`` builds a fresh
[FeedAggregator][notefeed.services.feed.pipeline.FeedAggregator], projects
the requested page and renders it. Nothing is cached server-side; the
response carries a short public ``Cache-Control`` so a reverse proxy can.

Routes:
    ``GET /``: The feed page. ``?page=N`` selects a page; missing or
        malformed values fall back to page 1.
    ``GET /health``: Liveness probe.
    ``GET <metrics.path>``: Prometheus exposition, only when enabled.

See Also:
    [FeedConfig][notefeed.services.feed.configs.FeedConfig]: Settings
        consumed here.
    [render_page()][notefeed.services.feed.render.render_page]: Produces
        the HTML document.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import HTMLResponse

from notefeed.core.exceptions import IdentityNotFoundError
from notefeed.core.logger import Logger
from notefeed.core.metrics import FEED_REQUESTS, render_latest

from .pipeline import FeedAggregator
from .projection import project_page
from .render import render_not_found, render_page


if TYPE_CHECKING:
    from collections.abc import Callable

    from .configs import FeedConfig


_HTTP_ERROR_THRESHOLD = 400

_logger = Logger("feed.http")


def parse_page(value: str | None) -> int:
    """Parse the ``page`` query parameter leniently; anything invalid is page 1."""
    if value is None:
        return 1
    try:
        page = int(value.strip())
    except ValueError:
        return 1
    return max(page, 1)


def create_app(
    config: FeedConfig,
    *,
    aggregator_factory: Callable[[FeedConfig], FeedAggregator] = FeedAggregator,
) -> FastAPI:
    """Build the feed application.

    Args:
        config: Validated service configuration.
        aggregator_factory: Builds the per-request aggregator; replaced in
            tests to avoid network access.

    Returns:
        A FastAPI app ready to be served by uvicorn.
    """
    app = FastAPI(title="notefeed", docs_url=None, redoc_url=None, openapi_url=None)
    cache_control = f"public, max-age={config.page.cache_max_age}"

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Any) -> Response:
        start = time.monotonic()
        try:
            response: Response = await call_next(request)
        except Exception as exc:  # HTTP request error boundary
            _logger.exception("unhandled_error", error=str(exc), path=request.url.path)
            response = HTMLResponse("Internal server error", status_code=500)
        duration_ms = round((time.monotonic() - start) * 1000, 1)
        if response.status_code >= _HTTP_ERROR_THRESHOLD:
            _logger.warning(
                "request_failed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=duration_ms,
            )
        else:
            _logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=duration_ms,
            )
        return response

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def feed(request: Request) -> HTMLResponse:
        page = parse_page(request.query_params.get("page"))
        aggregator = aggregator_factory(config)
        try:
            state = await aggregator.run(page)
        except IdentityNotFoundError as e:
            FEED_REQUESTS.labels(status="not_found").inc()
            return HTMLResponse(render_not_found(config.page, str(e)), status_code=404)
        except Exception:
            FEED_REQUESTS.labels(status="error").inc()
            raise

        view = project_page(
            state,
            page,
            config.page.page_size,
            config.page.link_base,
            parent_preview_length=config.page.parent_preview_length,
        )
        FEED_REQUESTS.labels(status="ok").inc()
        return HTMLResponse(
            render_page(view, config.page, handle=config.identity.handle),
            headers={"Cache-Control": cache_control},
        )

    if config.metrics.enabled:

        @app.get(config.metrics.path)
        async def metrics() -> Response:
            body, content_type = render_latest()
            return Response(content=body, media_type=content_type)

    return app
