"""Service providers shared by the auth dependencies and the v1 routes."""

from functools import lru_cache
from typing import Callable

from domain.services.access_grant_service import AccessGrantService
from domain.services.invitation_service import InvitationService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_access_grant_service() -> AccessGrantService:
    """Get AccessGrant service instance."""
    return AccessGrantService(get_uow_factory())


@lru_cache
def get_invitation_service() -> InvitationService:
    """Get Invitation service instance."""
    return InvitationService(get_uow_factory())
