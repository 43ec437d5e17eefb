"""Services package - business logic for URL Shortener Service."""

from .audit import AuditEvent, AuditManager, AuditWriter, FileAuditWriter, RemoteAuditWriter, build_audit_manager
from .batcher import DeleteBatcher
from .exceptions import ServiceClosedError
from .url_service import URLService

__all__ = [
    "AuditEvent",
    "AuditManager",
    "AuditWriter",
    "FileAuditWriter",
    "RemoteAuditWriter",
    "build_audit_manager",
    "DeleteBatcher",
    "ServiceClosedError",
    "URLService",
]
