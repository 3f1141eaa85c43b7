"""Invitation service layer with business logic."""

import secrets
from collections.abc import Callable
from datetime import timedelta
from uuid import UUID

import structlog

from core.clock import utcnow
from core.config import settings
from core.exceptions import (
    DuplicateInvitationError,
    InvitationAlreadyUsedError,
    InvitationExpiredError,
    InvitationNotFoundError,
    NotFoundError,
    ValidationError,
)
from domain.entities.access_grant import AccessGrant
from domain.entities.invitation import InvalidReason, Invitation, InvitationValidation
from domain.entities.role import Role
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

# 24 random bytes -> 192 bits -> 32 URL-safe characters
INVITATION_CODE_BYTES = 24

_REASON_ERRORS = {
    InvalidReason.NOT_FOUND: InvitationNotFoundError,
    InvalidReason.ALREADY_USED: InvitationAlreadyUsedError,
    InvalidReason.EXPIRED: InvitationExpiredError,
}


class InvitationService:
    """Issues, validates and redeems single-use trip invitations."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        default_ttl_seconds: int = settings.invitation_ttl_seconds,
    ) -> None:
        self._uow_factory = uow_factory
        self._default_ttl_seconds = default_ttl_seconds

    async def create_invitation(
        self,
        creator_id: UUID,
        role: Role,
        resource_ids: list[UUID],
        email: str | None = None,
        ttl_seconds: int | None = None,
    ) -> Invitation:
        """Issue an invitation granting ``role`` on every trip in ``resource_ids``.

        Args:
            creator_id: The admin issuing the invitation.
            role: Role the redeemer will receive on each trip.
            resource_ids: Trips to grant. Duplicates are collapsed.
            email: Optional address the invitation is meant for.
            ttl_seconds: Lifetime. Negative values yield an already-expired
                invitation and are kept as-is.

        Returns:
            The stored invitation, including its code.

        Raises:
            ValidationError: If no trips are given.
            DuplicateInvitationError: If a pending invitation exists for the email.
        """
        unique_ids = list(dict.fromkeys(resource_ids))
        if not unique_ids:
            raise ValidationError("At least one trip ID is required")

        normalized_email = email.strip().lower() if email else None
        ttl = self._default_ttl_seconds if ttl_seconds is None else ttl_seconds
        now = utcnow()

        async with self._uow_factory() as uow:
            if normalized_email:
                existing = await uow.invitations.get_pending_for_email(normalized_email, now)
                if existing:
                    raise DuplicateInvitationError(normalized_email)

            invitation = Invitation(
                code=secrets.token_urlsafe(INVITATION_CODE_BYTES),
                created_by_user_id=creator_id,
                role=role,
                email=normalized_email,
                expires_at=now + timedelta(seconds=ttl),
                created_at=now,
                resource_ids=unique_ids,
            )

            created = await uow.invitations.create(invitation)
            await uow.commit()

        logger.info(
            "invitation_created",
            invitation_id=str(created.id),
            created_by=str(creator_id),
            role=role.value,
            resource_count=len(unique_ids),
        )
        return created  # type: ignore[no-any-return]

    async def validate_invitation(self, code: str) -> InvitationValidation:
        """Report whether a code could be redeemed right now, without consuming it."""
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_code(code)

        if not invitation:
            return InvitationValidation(valid=False, reason=InvalidReason.NOT_FOUND)

        reason = invitation.unavailable_reason(utcnow())
        if reason:
            return InvitationValidation(valid=False, reason=reason)

        return InvitationValidation(
            valid=True,
            role=invitation.role,
            resource_ids=invitation.resource_ids,
            email=invitation.email,
            expires_at=invitation.expires_at,
        )

    async def redeem_invitation(self, code: str, user_id: UUID) -> list[AccessGrant]:
        """Consume an invitation and grant its trips to ``user_id``.

        The claim on the invitation and every resulting grant commit in one
        transaction. The claim is a conditional update, so when several
        callers race on the same code exactly one of them gets the grants and
        the rest see InvitationAlreadyUsedError.

        Raises:
            InvitationNotFoundError: If no invitation has this code.
            InvitationAlreadyUsedError: If it was redeemed or revoked already.
            InvitationExpiredError: If it expired before being redeemed.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_code(code)
            now = utcnow()

            if not invitation:
                raise InvitationNotFoundError()
            reason = invitation.unavailable_reason(now)
            if reason:
                raise _REASON_ERRORS[reason]()

            claimed = await uow.invitations.mark_used(invitation.id, user_id, now)
            if not claimed:
                await uow.rollback()
                logger.info("invitation_redeem_lost_race", invitation_id=str(invitation.id))
                raise InvitationAlreadyUsedError()

            grants = await uow.access_grants.upsert_many(
                user_id,
                invitation.resource_ids,
                invitation.role,
                invitation.created_by_user_id,
            )
            await uow.commit()

        logger.info(
            "invitation_redeemed",
            invitation_id=str(invitation.id),
            user_id=str(user_id),
            grant_count=len(grants),
        )
        return grants  # type: ignore[no-any-return]

    async def revoke_invitation(self, invitation_id: UUID) -> None:
        """Consume a pending invitation without granting anything.

        Raises:
            NotFoundError: If the invitation id is unknown.
            InvitationAlreadyUsedError: If it is no longer pending because it was used.
            InvitationExpiredError: If it is no longer pending because it expired.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_id(invitation_id)
            if not invitation:
                raise NotFoundError("Invitation", str(invitation_id))

            now = utcnow()
            reason = invitation.unavailable_reason(now)
            if reason:
                raise _REASON_ERRORS[reason]()

            if not await uow.invitations.mark_used(invitation.id, None, now):
                await uow.rollback()
                raise InvitationAlreadyUsedError()
            await uow.commit()

        logger.info("invitation_revoked", invitation_id=str(invitation_id))

    async def list_invitations(self) -> list[Invitation]:
        """List every invitation, newest first."""
        async with self._uow_factory() as uow:
            return await uow.invitations.list_all()  # type: ignore[no-any-return]
