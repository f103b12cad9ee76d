"""Topic contract and shared rendering for dashboard pages.

A topic is one page of the dashboard. At startup the app hands every topic an
HTML router (mounted at `/<name>`) and an API router (mounted at
`/api/<name>`), plus a :class:`RenderContext` used to produce responses so all
topics share one layout and one error format.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from fastapi import APIRouter
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import Environment, PackageLoader, select_autoescape

from issues_dashboard.errors import IssuesDashboardError

logger = logging.getLogger(__name__)


class Topic(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def title(self) -> str: ...

    @property
    def description(self) -> str: ...

    def configure(
        self, html_router: APIRouter, api_router: APIRouter, context: RenderContext
    ) -> None: ...


def status_for(error: Exception) -> tuple[int, str]:
    if isinstance(error, IssuesDashboardError):
        return error.status_code, error.message
    return 500, str(error) or error.__class__.__name__


def template_environment(package: str, path: str = "templates") -> Environment:
    return Environment(
        loader=PackageLoader(package, path),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


class RenderContext:
    """Wraps topic output into complete HTTP responses."""

    def __init__(self, topics: Sequence[Topic] = ()) -> None:
        self._topics = topics
        self._env = template_environment("issues_dashboard")

    @property
    def topics(self) -> Sequence[Topic]:
        return self._topics

    def render_html(self, title: str, content: str, *, status_code: int = 200) -> HTMLResponse:
        page = self._env.get_template("layout.html").render(
            title=title,
            content=content,
            topics=self._topics,
        )
        return HTMLResponse(page, status_code=status_code)

    def render_index(self) -> HTMLResponse:
        content = self._env.get_template("index.html").render(topics=self._topics)
        return self.render_html("Dashboard", content)

    def render_html_error(self, error: Exception) -> HTMLResponse:
        status_code, message = status_for(error)
        _log_error(error, status_code)
        content = self._env.get_template("error.html").render(
            status_code=status_code,
            message=message,
        )
        return self.render_html("Error", content, status_code=status_code)

    def render_json(self, status_code: int, payload: Any) -> JSONResponse:
        return JSONResponse(content=jsonable_encoder(payload), status_code=status_code)

    def render_json_error(self, error: Exception) -> JSONResponse:
        status_code, message = status_for(error)
        _log_error(error, status_code)
        return JSONResponse(content={"error": message}, status_code=status_code)


def _log_error(error: Exception, status_code: int) -> None:
    if isinstance(error, IssuesDashboardError):
        level = logging.ERROR if status_code >= 500 else logging.INFO
        logger.log(level, "Request failed", extra={"status": status_code, "error": error.message})
        return
    logger.error(
        "Unexpected error while rendering",
        exc_info=(type(error), error, error.__traceback__),
        extra={"status": status_code},
    )
