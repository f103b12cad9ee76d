"""FastAPI app factory.

HTML pages are served at `/<topic>/`, JSON at `/api/<topic>/`. Topics hold the
logic; this module only wires settings, storage and routing together.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI
from fastapi.responses import HTMLResponse

from issues_dashboard import __version__
from issues_dashboard.config import DashboardSettings
from issues_dashboard.dashboard import RenderContext, Topic
from issues_dashboard.storage import JsonEntityStore, ResolutionCache
from issues_dashboard.topics.issues.resolver import IssueSummaryResolver
from issues_dashboard.topics.issues.topic import IssuesTopic

logger = logging.getLogger(__name__)


def build_resolver(
    settings: DashboardSettings, store: JsonEntityStore | None = None
) -> IssueSummaryResolver:
    store = store or JsonEntityStore(settings.state_path)
    cache = ResolutionCache(
        store,
        ttl_seconds=settings.cache_ttl_seconds,
        max_entries=settings.cache_max_entries,
    )
    return IssueSummaryResolver(
        cache=cache,
        store=store,
        repo_name=settings.repo_name,
        projection=settings.projection,
        scan_filter=settings.scan_filter,
    )


def create_app(settings: DashboardSettings | None = None) -> FastAPI:
    settings = settings or DashboardSettings()

    app = FastAPI(
        title="Issues Dashboard",
        version=__version__,
        description="Operational dashboard listing repository issues.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Expose settings for request handlers that want to read it.
    app.state.settings = settings

    topics: list[Topic] = [
        IssuesTopic(
            build_resolver(settings),
            default_org=settings.default_org,
            api_default_org=settings.api_default_org,
            request_timeout_seconds=settings.request_timeout_seconds,
        )
    ]
    render = RenderContext(topics)

    @app.get("/api/health")
    def health() -> dict[str, object]:
        return {
            "status": "ok",
            "version": __version__,
            "topics": [t.name for t in topics],
        }

    @app.get("/", include_in_schema=False, response_class=HTMLResponse)
    def index() -> HTMLResponse:
        return render.render_index()

    # Routes must be registered on the topic routers before they are included.
    for topic in topics:
        html_router = APIRouter(tags=[topic.name])
        api_router = APIRouter(tags=[topic.name])
        topic.configure(html_router, api_router, render)
        app.include_router(html_router, prefix=f"/{topic.name}", include_in_schema=False)
        app.include_router(api_router, prefix=f"/api/{topic.name}")
        logger.debug("Registered topic", extra={"topic": topic.name})

    return app
