"""SQLAlchemy implementation of Invitation repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.invitation import Invitation
from domain.entities.role import Role
from infrastructure.database.models import InvitationModel, InvitationResourceModel


class SQLAlchemyInvitationRepository:
    """SQLAlchemy implementation of IInvitationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, invitation: Invitation) -> Invitation:
        """Create an invitation and its trip links in the current transaction."""
        model = self._to_model(invitation)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def get_by_id(self, id: UUID) -> Invitation | None:
        """Get an invitation by its primary key."""
        stmt = select(InvitationModel).where(InvitationModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_code(self, code: str) -> Invitation | None:
        """Get an invitation by its code."""
        stmt = select(InvitationModel).where(InvitationModel.code == code)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_pending_for_email(self, email: str, now: datetime) -> Invitation | None:
        """Get an unused, unexpired invitation addressed to an email."""
        stmt = (
            select(InvitationModel)
            .where(
                InvitationModel.email == email,
                InvitationModel.used_at.is_(None),
                InvitationModel.expires_at > now,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_all(self) -> list[Invitation]:
        """List all invitations, newest first."""
        stmt = select(InvitationModel).order_by(InvitationModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def mark_used(self, id: UUID, used_by_user_id: UUID | None, now: datetime) -> bool:
        """Flip ``used_at`` from NULL to ``now``; True only for the winning caller."""
        stmt = (
            update(InvitationModel)
            .where(
                InvitationModel.id == id,
                InvitationModel.used_at.is_(None),
                InvitationModel.expires_at > now,
            )
            .values(used_at=now, used_by_user_id=used_by_user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined, no-any-return]

    def _to_entity(self, model: InvitationModel) -> Invitation:
        """Convert ORM model to domain entity."""
        return Invitation(
            id=model.id,
            code=model.code,
            created_by_user_id=model.created_by_user_id,
            email=model.email,
            role=Role(model.role),
            expires_at=model.expires_at,
            used_at=model.used_at,
            used_by_user_id=model.used_by_user_id,
            created_at=model.created_at,
            resource_ids=[link.resource_id for link in model.resources],
        )

    def _to_model(self, entity: Invitation) -> InvitationModel:
        """Convert domain entity to ORM model."""
        return InvitationModel(
            id=entity.id,
            code=entity.code,
            created_by_user_id=entity.created_by_user_id,
            email=entity.email,
            role=entity.role.value,
            expires_at=entity.expires_at,
            used_at=entity.used_at,
            used_by_user_id=entity.used_by_user_id,
            created_at=entity.created_at,
            resources=[
                InvitationResourceModel(resource_id=resource_id)
                for resource_id in entity.resource_ids
            ],
        )
