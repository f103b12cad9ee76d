"""FastAPI server adapter for the issues dashboard.

Design intent:
- Keep resolution logic in `issues_dashboard.topics.*`
- Keep server-specific concerns (routing, app wiring) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from issues_dashboard.server.app import create_app
