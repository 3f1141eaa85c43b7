"""Access grant repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.access_grant import AccessGrant, AccessGrantWithUser
from domain.entities.role import Role


class IAccessGrantRepository(Protocol):
    """Repository interface for AccessGrant entities."""

    async def get_for_user_resource(self, user_id: UUID, resource_id: UUID) -> AccessGrant | None:
        """Get the grant for a (user, trip) pair."""
        ...

    async def get_role(self, user_id: UUID, resource_id: UUID) -> str | None:
        """Get the raw stored role for a (user, trip) pair in one query."""
        ...

    async def create(self, grant: AccessGrant) -> AccessGrant:
        """Insert a grant. Raises AccessGrantExistsError on a duplicate pair."""
        ...

    async def upsert_many(
        self,
        user_id: UUID,
        resource_ids: list[UUID],
        role: Role,
        granted_by_user_id: UUID | None,
    ) -> list[AccessGrant]:
        """Insert or promote grants for one user across several trips."""
        ...

    async def update_role(self, id: UUID, role: Role) -> AccessGrant | None:
        """Change a grant's role. Returns None if the grant doesn't exist."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a grant and return whether it existed."""
        ...

    async def list_for_resource(self, resource_id: UUID) -> list[AccessGrantWithUser]:
        """List grants on a trip joined with user info."""
        ...

    async def list_for_user(self, user_id: UUID) -> list[AccessGrant]:
        """List all grants held by a user."""
        ...
