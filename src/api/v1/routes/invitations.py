"""Invitation API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import ORJSONResponse

from api.dependencies.auth import AdminIdentity, CurrentIdentity
from api.dependencies.services import get_invitation_service
from api.v1.schemas.access_grant import AccessGrantListResponse, AccessGrantResponse
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.invitation import (
    CreateInvitationRequest,
    InvitationCreatedResponse,
    InvitationListResponse,
    InvitationResponse,
    InvitationValidationResponse,
    RedeemInvitationRequest,
)
from core.rate_limit import limiter
from domain.entities.invitation import InvalidReason
from domain.entities.role import Role
from domain.services.invitation_service import InvitationService

router = APIRouter(prefix="/invitations", tags=["invitations"])

_REASON_MESSAGES = {
    InvalidReason.NOT_FOUND: "Invitation not found",
    InvalidReason.ALREADY_USED: "Invitation has already been used",
    InvalidReason.EXPIRED: "Invitation has expired",
}


@router.post(
    "",
    response_model=InvitationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create trip invitation",
    responses={
        201: {"description": "Invitation created"},
        400: {"model": ErrorResponse, "description": "Invalid payload"},
        403: {"model": ErrorResponse, "description": "Admin only"},
        409: {"model": ErrorResponse, "description": "Pending invitation exists for email"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_invitation(
    request: Request,
    body: CreateInvitationRequest,
    admin: AdminIdentity,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationCreatedResponse:
    """Issue an invitation granting a role on one or more trips. Admin only."""
    invitation = await service.create_invitation(
        creator_id=admin.id,
        role=Role(body.role),
        resource_ids=body.trip_ids,
        email=body.email,
        ttl_seconds=body.ttl_seconds,
    )
    return InvitationCreatedResponse(
        data=InvitationResponse.from_entity(invitation),
        trip_ids=invitation.resource_ids,
    )


@router.get(
    "",
    response_model=InvitationListResponse,
    summary="List invitations",
    responses={
        200: {"description": "All invitations, newest first"},
        403: {"model": ErrorResponse, "description": "Admin only"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_invitations(
    request: Request,
    admin: AdminIdentity,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationListResponse:
    """List every invitation with its derived status. Admin only."""
    invitations = await service.list_invitations()
    data = [InvitationResponse.from_entity(inv) for inv in invitations]
    return InvitationListResponse(data=data, meta={"total": len(data)})


@router.delete(
    "/{invitation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke invitation",
    responses={
        204: {"description": "Invitation revoked"},
        400: {"model": ErrorResponse, "description": "Invitation is not pending"},
        403: {"model": ErrorResponse, "description": "Admin only"},
        404: {"model": ErrorResponse, "description": "Invitation not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def revoke_invitation(
    request: Request,
    invitation_id: UUID,
    admin: AdminIdentity,
    service: InvitationService = Depends(get_invitation_service),
) -> None:
    """Consume a pending invitation so it can no longer be redeemed. Admin only."""
    await service.revoke_invitation(invitation_id)
    return None


@router.get(
    "/validate/{code}",
    response_model=InvitationValidationResponse,
    summary="Validate invitation code",
    responses={
        200: {"description": "Code can be redeemed"},
        400: {"model": InvitationValidationResponse, "description": "Code can't be redeemed"},
        429: {"model": ErrorResponse, "description": "Too many attempts"},
    },
)
@limiter.limit("5/minute")  # type: ignore[untyped-decorator]
async def validate_invitation(
    request: Request,
    code: str = Path(..., max_length=64),
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationValidationResponse | ORJSONResponse:
    """Check a code without consuming it. Public, so heavily rate limited."""
    result = await service.validate_invitation(code)

    if not result.valid:
        reason = result.reason or InvalidReason.NOT_FOUND
        body = InvitationValidationResponse(
            valid=False,
            reason=reason.value,
            message=_REASON_MESSAGES[reason],
        )
        return ORJSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(mode="json", include={"valid", "reason", "message"}),
        )

    return InvitationValidationResponse(
        valid=True,
        role=result.role.value if result.role else None,
        trip_ids=result.resource_ids,
        email=result.email,
        expires_at=result.expires_at,
    )


@router.post(
    "/redeem",
    response_model=AccessGrantListResponse,
    summary="Redeem invitation",
    responses={
        200: {"description": "Invitation consumed, grants issued"},
        400: {"model": ErrorResponse, "description": "Code unknown, used or expired"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def redeem_invitation(
    request: Request,
    body: RedeemInvitationRequest,
    identity: CurrentIdentity,
    service: InvitationService = Depends(get_invitation_service),
) -> AccessGrantListResponse:
    """Redeem a code and receive its trip grants."""
    grants = await service.redeem_invitation(body.code, identity.id)
    data = [AccessGrantResponse.from_entity(grant) for grant in grants]
    return AccessGrantListResponse(data=data, meta={"total": len(data)})
