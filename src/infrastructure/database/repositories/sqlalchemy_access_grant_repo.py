"""SQLAlchemy implementation of AccessGrant repository."""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import utcnow
from core.exceptions import AccessGrantExistsError
from domain.entities.access_grant import AccessGrant, AccessGrantWithUser
from domain.entities.role import Role, parse_role, satisfies
from infrastructure.database.models import AccessGrantModel, UserProfileModel

logger = logging.getLogger(__name__)

# PostgreSQL names the constraint; SQLite only lists the columns
_DUPLICATE_GRANT_MARKERS = (
    "uq_access_grants_user_resource",
    "access_grants.user_id, access_grants.resource_id",
)


def _is_duplicate_grant(error: IntegrityError) -> bool:
    """True if the error is the (user, trip) unique constraint, not an FK or CHECK."""
    message = str(error.orig)
    return any(marker in message for marker in _DUPLICATE_GRANT_MARKERS)


class SQLAlchemyAccessGrantRepository:
    """SQLAlchemy implementation of IAccessGrantRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_user_resource(self, user_id: UUID, resource_id: UUID) -> AccessGrant | None:
        """Get the grant for a (user, trip) pair."""
        stmt = select(AccessGrantModel).where(
            AccessGrantModel.user_id == user_id,
            AccessGrantModel.resource_id == resource_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_role(self, user_id: UUID, resource_id: UUID) -> str | None:
        """Fetch only the stored role string; left unparsed on purpose."""
        stmt = select(AccessGrantModel.role).where(
            AccessGrantModel.user_id == user_id,
            AccessGrantModel.resource_id == resource_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, grant: AccessGrant) -> AccessGrant:
        """Insert a new grant."""
        model = self._to_model(grant)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if not _is_duplicate_grant(e):
                raise
            logger.info("Grant insert hit unique constraint for user %s", grant.user_id)
            raise AccessGrantExistsError(str(grant.user_id), str(grant.resource_id)) from e
        return grant

    async def upsert_many(
        self,
        user_id: UUID,
        resource_ids: list[UUID],
        role: Role,
        granted_by_user_id: UUID | None,
    ) -> list[AccessGrant]:
        """Insert missing grants and promote lower ones; never downgrade."""
        stmt = select(AccessGrantModel).where(
            AccessGrantModel.user_id == user_id,
            AccessGrantModel.resource_id.in_(resource_ids),
        )
        result = await self._session.execute(stmt)
        existing = {model.resource_id: model for model in result.scalars()}

        models: list[AccessGrantModel] = []
        for resource_id in resource_ids:
            model = existing.get(resource_id)
            if model is None:
                model = AccessGrantModel(
                    user_id=user_id,
                    resource_id=resource_id,
                    role=role.value,
                    granted_by_user_id=granted_by_user_id,
                    granted_at=utcnow(),
                )
                self._session.add(model)
            elif not satisfies(model.role, role):
                model.role = role.value
                model.granted_by_user_id = granted_by_user_id
            models.append(model)

        await self._session.flush()
        return self._to_entities(models)

    async def update_role(self, id: UUID, role: Role) -> AccessGrant | None:
        """Change a grant's role."""
        stmt = select(AccessGrantModel).where(AccessGrantModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        model.role = role.value
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a grant."""
        stmt = select(AccessGrantModel).where(AccessGrantModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def list_for_resource(self, resource_id: UUID) -> list[AccessGrantWithUser]:
        """List grants on a trip joined with the grantee's profile."""
        stmt = (
            select(AccessGrantModel, UserProfileModel.email, UserProfileModel.display_name)
            .join(UserProfileModel, UserProfileModel.id == AccessGrantModel.user_id)
            .where(AccessGrantModel.resource_id == resource_id)
            .order_by(AccessGrantModel.granted_at.desc())
        )
        result = await self._session.execute(stmt)
        rows = []
        for model, email, display_name in result.all():
            grant = self._to_entity(model)
            if grant:
                rows.append(
                    AccessGrantWithUser(grant=grant, email=email, display_name=display_name)
                )
        return rows

    async def list_for_user(self, user_id: UUID) -> list[AccessGrant]:
        """List all grants held by a user, newest first."""
        stmt = (
            select(AccessGrantModel)
            .where(AccessGrantModel.user_id == user_id)
            .order_by(AccessGrantModel.granted_at.desc())
        )
        result = await self._session.execute(stmt)
        return self._to_entities(result.scalars())

    def _to_entities(self, models: Iterable[AccessGrantModel]) -> list[AccessGrant]:
        return [grant for grant in map(self._to_entity, models) if grant]

    def _to_entity(self, model: AccessGrantModel) -> AccessGrant | None:
        """Convert ORM model to domain entity; rows with an unknown role are skipped."""
        role = parse_role(model.role)
        if role is None:
            logger.warning("Skipping access grant %s with unknown role %r", model.id, model.role)
            return None
        return AccessGrant(
            id=model.id,
            user_id=model.user_id,
            resource_id=model.resource_id,
            role=role,
            granted_by_user_id=model.granted_by_user_id,
            granted_at=model.granted_at,
        )

    def _to_model(self, entity: AccessGrant) -> AccessGrantModel:
        """Convert domain entity to ORM model."""
        return AccessGrantModel(
            id=entity.id,
            user_id=entity.user_id,
            resource_id=entity.resource_id,
            role=entity.role.value,
            granted_by_user_id=entity.granted_by_user_id,
            granted_at=entity.granted_at,
        )
