"""Dependency providers for API routes.

Application-wide objects are created in the lifespan handler and kept on
``app.state``; tests replace these providers via ``dependency_overrides``.
"""

from typing import Optional

from fastapi import Request

from ..repository import FileStorage
from ..services import AuditManager, URLService


def get_url_service(request: Request) -> URLService:
    """Get the URL service for dependency injection."""
    return request.app.state.url_service


def get_file_storage(request: Request) -> Optional[FileStorage]:
    """Get the file mirror, or None when a database is configured."""
    return getattr(request.app.state, "file_storage", None)


def get_audit_manager(request: Request) -> AuditManager:
    """Get the audit manager for dependency injection."""
    return request.app.state.audit_manager


def get_user_id(request: Request) -> str:
    """Get the caller's user id assigned by UserCookieMiddleware."""
    return getattr(request.state, "user_id", "")
