"""Invitation domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from core.clock import utcnow
from domain.entities.role import Role


class InvitationStatus(StrEnum):
    """Derived lifecycle state. Only ``used_at`` is stored."""

    PENDING = "pending"
    USED = "used"
    EXPIRED = "expired"


class InvalidReason(StrEnum):
    """Why a code cannot be redeemed, in evaluation order."""

    NOT_FOUND = "not_found"
    ALREADY_USED = "already_used"
    EXPIRED = "expired"


@dataclass
class Invitation:
    """Domain entity for a single-use trip invitation."""

    code: str
    created_by_user_id: UUID
    role: Role
    expires_at: datetime
    resource_ids: list[UUID] = field(default_factory=list)
    email: str | None = None
    id: UUID = field(default_factory=uuid4)
    used_at: datetime | None = None
    used_by_user_id: UUID | None = None
    created_at: datetime = field(default_factory=utcnow)

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check if the invitation has expired."""
        return (now or utcnow()) >= self.expires_at

    def unavailable_reason(self, now: datetime | None = None) -> InvalidReason | None:
        """Return why the invitation can't be redeemed, or None if it can.

        A used invitation reports ALREADY_USED even when it has also expired.
        """
        if self.used_at is not None:
            return InvalidReason.ALREADY_USED
        if self.is_expired(now):
            return InvalidReason.EXPIRED
        return None

    def status(self, now: datetime | None = None) -> InvitationStatus:
        """Compute the lifecycle state at ``now``."""
        reason = self.unavailable_reason(now)
        if reason is InvalidReason.ALREADY_USED:
            return InvitationStatus.USED
        if reason is InvalidReason.EXPIRED:
            return InvitationStatus.EXPIRED
        return InvitationStatus.PENDING


@dataclass
class InvitationValidation:
    """Result of checking a code without consuming it."""

    valid: bool
    reason: InvalidReason | None = None
    role: Role | None = None
    resource_ids: list[UUID] = field(default_factory=list)
    email: str | None = None
    expires_at: datetime | None = None
