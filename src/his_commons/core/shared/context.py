"""Request context entity.

This module defines the RequestContext entity carrying the acting
principal and tenant for a request. The repository layer only reads it
to populate audit fields; an absent context is always legal.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union
from datetime import datetime, timezone

from ...config.constants import AuditDefaults
from ...utils.uuid import generate_uuid_v4


@dataclass(frozen=True)
class AuditUser:
    """Acting principal as supplied by the authentication layer."""

    id: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def display_name(self) -> Optional[str]:
        """First available human-readable name."""
        return self.name or self.username or self.full_name

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AuditUser":
        """Build from a plain mapping using wire (camelCase) or Python keys."""
        user_id = data.get("id")
        return cls(
            id=str(user_id) if user_id is not None else None,
            name=data.get("name"),
            username=data.get("username"),
            full_name=data.get("fullName") or data.get("full_name"),
        )


@dataclass
class RequestContext:
    """Request context entity.

    Represents the context of a request including user and tenant
    information.
    """

    user: Optional[AuditUser] = None
    tenant_id: Optional[str] = None
    request_id: str = field(default_factory=generate_uuid_v4)
    request_metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_authenticated(self) -> bool:
        """Check if request carries an identified user."""
        return self.user is not None and self.user.id is not None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RequestContext":
        """Build from ``{"user": {...}, "tenantId": ...}``."""
        user_data = data.get("user")
        user = None
        if isinstance(user_data, AuditUser):
            user = user_data
        elif isinstance(user_data, Mapping):
            user = AuditUser.from_mapping(user_data)
        return cls(
            user=user,
            tenant_id=data.get("tenantId") or data.get("tenant_id"),
        )


@dataclass(frozen=True)
class AuditActor:
    """Resolved audit identity stamped onto mutated records."""

    user_id: str
    user_name: str


ContextLike = Union[RequestContext, Mapping[str, Any], None]


def coerce_context(context: ContextLike) -> Optional[RequestContext]:
    """Accept a RequestContext, a plain mapping or nothing."""
    if context is None or isinstance(context, RequestContext):
        return context
    if isinstance(context, Mapping):
        return RequestContext.from_mapping(context)
    raise TypeError(f"Unsupported context type: {type(context).__name__}")


def resolve_audit_actor(context: ContextLike) -> AuditActor:
    """Resolve the audit identity, degrading to placeholders.

    Missing user id becomes ``"system"`` and a missing display name
    becomes ``"Unknown"``; the operation is never blocked.
    """
    request_context = coerce_context(context)
    user = request_context.user if request_context else None
    if user is None:
        return AuditActor(AuditDefaults.USER_ID, AuditDefaults.USER_NAME)
    return AuditActor(
        user_id=user.id or AuditDefaults.USER_ID,
        user_name=user.display_name or AuditDefaults.USER_NAME,
    )
