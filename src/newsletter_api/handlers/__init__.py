"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .account_handler import AccountHandler
from .newsletter_handler import NewsletterHandler
from .task_handler import TaskHandler

__all__ = [
    "AccountHandler",
    "NewsletterHandler",
    "TaskHandler",
]
