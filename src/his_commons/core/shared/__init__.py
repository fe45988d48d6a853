"""Shared cross-cutting entities."""

from .context import (
    AuditUser,
    AuditActor,
    RequestContext,
    ContextLike,
    coerce_context,
    resolve_audit_actor,
)

__all__ = [
    "AuditUser",
    "AuditActor",
    "RequestContext",
    "ContextLike",
    "coerce_context",
    "resolve_audit_actor",
]
