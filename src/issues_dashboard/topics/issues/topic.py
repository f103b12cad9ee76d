"""The issues topic: lists issues of one repository, as HTML or JSON."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import TemplateError

from issues_dashboard.context import Disconnectable, RequestContext, run_until_disconnected
from issues_dashboard.dashboard import RenderContext, template_environment
from issues_dashboard.errors import IssuesDashboardError
from issues_dashboard.topics.issues.resolver import IssueSummary, IssueSummaryResolver

logger = logging.getLogger(__name__)


class IssuesTopic:
    name = "issues"
    title = "Issues"
    description = "Information on new and old issues."

    def __init__(
        self,
        resolver: IssueSummaryResolver,
        *,
        default_org: str,
        api_default_org: str,
        request_timeout_seconds: float | None = None,
    ) -> None:
        self._resolver = resolver
        self._default_org = default_org
        self._api_default_org = api_default_org
        self._timeout = request_timeout_seconds
        self._page = template_environment(__package__).get_template("page.html")

    def configure(
        self, html_router: APIRouter, api_router: APIRouter, context: RenderContext
    ) -> None:
        @html_router.get("/", response_class=HTMLResponse)
        async def list_issues_html(
            request: Request, org: str | None = Query(default=None)
        ) -> HTMLResponse:
            org_login = _org_or_default(org, self._default_org)
            try:
                issues = await self.get_issues(request, org_login)
            except IssuesDashboardError as e:
                return context.render_html_error(e)

            try:
                content = self._page.render(
                    issues=issues, org=org_login, repo=self._resolver.repo_name
                )
            except TemplateError as e:
                return context.render_html_error(e)
            return context.render_html(self.title, content)

        @api_router.get("/", response_model=None)
        async def list_issues_json(
            request: Request, org: str | None = Query(default=None)
        ) -> JSONResponse:
            org_login = _org_or_default(org, self._api_default_org)
            try:
                issues = await self.get_issues(request, org_login)
            except IssuesDashboardError as e:
                return context.render_json_error(e)
            return context.render_json(200, [issue.model_dump(mode="json") for issue in issues])

    async def get_issues(self, client: Disconnectable, org_login: str) -> list[IssueSummary]:
        """Resolve off the event loop, cancelling when the client disconnects."""
        context = RequestContext.with_timeout(self._timeout)
        return await run_until_disconnected(
            context, lambda: self._resolver.resolve(context, org_login), client
        )


def _org_or_default(value: str | None, default: str) -> str:
    org = (value or "").strip()
    return org or default
