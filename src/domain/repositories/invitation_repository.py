"""Invitation repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.invitation import Invitation


class IInvitationRepository(Protocol):
    """Repository interface for Invitation entities."""

    async def create(self, invitation: Invitation) -> Invitation:
        """Create an invitation together with its trip links."""
        ...

    async def get_by_id(self, id: UUID) -> Invitation | None:
        """Get an invitation by its primary key."""
        ...

    async def get_by_code(self, code: str) -> Invitation | None:
        """Get an invitation by its code."""
        ...

    async def get_pending_for_email(self, email: str, now: datetime) -> Invitation | None:
        """Get an unused, unexpired invitation addressed to an email."""
        ...

    async def list_all(self) -> list[Invitation]:
        """List all invitations, newest first."""
        ...

    async def mark_used(self, id: UUID, used_by_user_id: UUID | None, now: datetime) -> bool:
        """Atomically consume a pending invitation.

        Returns True only for the caller whose update flipped ``used_at``
        from NULL; every other caller gets False.
        """
        ...
