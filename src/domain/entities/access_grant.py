"""Access grant domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from core.clock import utcnow
from domain.entities.role import Role


@dataclass
class AccessGrant:
    """A user's standing permission on a single trip."""

    user_id: UUID
    resource_id: UUID
    role: Role
    granted_by_user_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    granted_at: datetime = field(default_factory=utcnow)


@dataclass
class AccessGrantWithUser:
    """Access grant joined with the grantee's profile fields."""

    grant: AccessGrant
    email: str
    display_name: str | None = None
