"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from core.clock import utcnow


@dataclass
class Profile:
    """User profile owned by the account service; read-only here."""

    id: UUID = field(default_factory=uuid4)
    email: str = ""
    display_name: str | None = None
    is_admin: bool = False
    created_at: datetime = field(default_factory=utcnow)
