"""Access grant service layer."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import AccessGrantExistsError, NotFoundError, ValidationError
from domain.entities.access_grant import AccessGrant, AccessGrantWithUser
from domain.entities.profile import Profile
from domain.entities.role import Role
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class AccessGrantService:
    """Administrative management of per-trip grants, plus the access lookup."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_role(self, user_id: UUID, resource_id: UUID) -> str | None:
        """Return the raw stored role for (user, trip), or None if no grant.

        One query, no interpretation: the caller decides what an unknown
        value means.
        """
        async with self._uow_factory() as uow:
            return await uow.access_grants.get_role(user_id, resource_id)  # type: ignore[no-any-return]

    async def grant(
        self,
        user_id: UUID,
        resource_id: UUID,
        role: Role,
        granted_by_user_id: UUID,
    ) -> AccessGrant:
        """Give a user access to a trip.

        Raises:
            NotFoundError: If the user has no profile.
            ValidationError: If the user is an admin (admins never hold grants).
            AccessGrantExistsError: If the user already has a grant on the trip.
        """
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise NotFoundError("User", str(user_id))
            if profile.is_admin:
                raise ValidationError(
                    "Cannot grant trip access to admin users "
                    "(they have implicit access to all trips)"
                )

            existing = await uow.access_grants.get_for_user_resource(user_id, resource_id)
            if existing:
                raise AccessGrantExistsError(str(user_id), str(resource_id))

            grant = AccessGrant(
                user_id=user_id,
                resource_id=resource_id,
                role=role,
                granted_by_user_id=granted_by_user_id,
            )
            created = await uow.access_grants.create(grant)
            await uow.commit()

        logger.info(
            "access_granted",
            grant_id=str(created.id),
            user_id=str(user_id),
            resource_id=str(resource_id),
            role=role.value,
        )
        return created  # type: ignore[no-any-return]

    async def update_role(self, grant_id: UUID, role: Role) -> AccessGrant:
        """Change the role on an existing grant."""
        async with self._uow_factory() as uow:
            updated = await uow.access_grants.update_role(grant_id, role)
            if not updated:
                raise NotFoundError("Access grant", str(grant_id))
            await uow.commit()

        logger.info("access_role_updated", grant_id=str(grant_id), role=role.value)
        return updated  # type: ignore[no-any-return]

    async def revoke(self, grant_id: UUID) -> None:
        """Remove a grant."""
        async with self._uow_factory() as uow:
            deleted = await uow.access_grants.delete(grant_id)
            if not deleted:
                raise NotFoundError("Access grant", str(grant_id))
            await uow.commit()

        logger.info("access_revoked", grant_id=str(grant_id))

    async def list_for_resource(self, resource_id: UUID) -> list[AccessGrantWithUser]:
        """List everyone with a grant on a trip."""
        async with self._uow_factory() as uow:
            return await uow.access_grants.list_for_resource(resource_id)  # type: ignore[no-any-return]

    async def list_for_user(self, user_id: UUID) -> list[AccessGrant]:
        """List the trips a user has been granted."""
        async with self._uow_factory() as uow:
            return await uow.access_grants.list_for_user(user_id)  # type: ignore[no-any-return]

    async def list_users(self) -> list[Profile]:
        """List every user profile, ordered by email, for picking a grantee."""
        async with self._uow_factory() as uow:
            return await uow.profiles.list_all()  # type: ignore[no-any-return]
