"""Unit tests for SQLAlchemyAccessGrantRepository error and row handling."""

from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from core.clock import utcnow
from core.exceptions import AccessGrantExistsError
from domain.entities.access_grant import AccessGrant
from domain.entities.role import Role
from infrastructure.database.models import AccessGrantModel
from infrastructure.database.repositories.sqlalchemy_access_grant_repo import (
    SQLAlchemyAccessGrantRepository,
)


def _session_failing_with(message: str) -> MagicMock:
    session = MagicMock()
    session.flush = AsyncMock(
        side_effect=IntegrityError("INSERT INTO access_grants", {}, Exception(message))
    )
    return session


def _session_returning(models: list[AccessGrantModel]) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value = models
    session = MagicMock()
    session.execute = AsyncMock(return_value=result)
    return session


def _row(user_id: UUID, role: str) -> AccessGrantModel:
    return AccessGrantModel(
        id=uuid4(),
        user_id=user_id,
        resource_id=uuid4(),
        role=role,
        granted_at=utcnow(),
    )


class TestCreate:
    @pytest.mark.asyncio
    async def test_unique_violation_is_conflict(self, user_id: UUID, trip_id: UUID) -> None:
        repo = SQLAlchemyAccessGrantRepository(
            _session_failing_with(
                'duplicate key value violates unique constraint "uq_access_grants_user_resource"'
            )
        )

        with pytest.raises(AccessGrantExistsError):
            await repo.create(AccessGrant(user_id=user_id, resource_id=trip_id, role=Role.VIEWER))

    @pytest.mark.asyncio
    async def test_sqlite_unique_violation_is_conflict(self, user_id: UUID, trip_id: UUID) -> None:
        repo = SQLAlchemyAccessGrantRepository(
            _session_failing_with(
                "UNIQUE constraint failed: access_grants.user_id, access_grants.resource_id"
            )
        )

        with pytest.raises(AccessGrantExistsError):
            await repo.create(AccessGrant(user_id=user_id, resource_id=trip_id, role=Role.VIEWER))

    @pytest.mark.asyncio
    async def test_foreign_key_violation_is_not_conflict(
        self, user_id: UUID, trip_id: UUID, admin_id: UUID
    ) -> None:
        repo = SQLAlchemyAccessGrantRepository(
            _session_failing_with(
                'insert or update on table "access_grants" violates foreign key constraint '
                '"access_grants_granted_by_user_id_fkey"'
            )
        )

        with pytest.raises(IntegrityError):
            await repo.create(
                AccessGrant(
                    user_id=user_id,
                    resource_id=trip_id,
                    role=Role.VIEWER,
                    granted_by_user_id=admin_id,
                )
            )


class TestUnknownStoredRole:
    @pytest.mark.asyncio
    async def test_list_for_user_skips_unknown_role(self, user_id: UUID) -> None:
        good = _row(user_id, "editor")
        repo = SQLAlchemyAccessGrantRepository(_session_returning([_row(user_id, "owner"), good]))

        grants = await repo.list_for_user(user_id)

        assert [g.id for g in grants] == [good.id]
        assert grants[0].role == Role.EDITOR
