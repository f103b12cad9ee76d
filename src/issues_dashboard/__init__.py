"""Issues Dashboard.

An operational dashboard topic listing repository issues:
- configuration loaded from `.env`
- structured logging
- a read-through cache over a JSON entity store
- HTML and JSON views over the same issue summaries
"""

__version__ = "0.1.0"

from issues_dashboard.config import DashboardSettings

__all__ = ["__version__", "DashboardSettings"]
