"""Trip access API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import AdminIdentity, CurrentIdentity, RequireViewer
from api.dependencies.services import get_access_grant_service
from api.v1.schemas.access_grant import (
    AccessGrantDetailResponse,
    AccessGrantListResponse,
    AccessGrantResponse,
    GrantAccessRequest,
    TripRoleResponse,
    TripUserListResponse,
    TripUserResponse,
    UpdateAccessRequest,
    UserListResponse,
    UserResponse,
)
from api.v1.schemas.common import ErrorResponse
from core.exceptions import ValidationError
from core.rate_limit import limiter
from domain.entities.role import Role
from domain.services.access_grant_service import AccessGrantService

# Grant management, keyed by grant id
router = APIRouter(prefix="/trip-access", tags=["trip-access"])

# Trip-scoped views
trips_router = APIRouter(prefix="/trips/{id}", tags=["trip-access"])

# Caller-scoped views
me_router = APIRouter(prefix="/me", tags=["trip-access"])

# Grantee lookup for the admin UI
users_router = APIRouter(prefix="/users", tags=["trip-access"])


@router.post(
    "",
    response_model=AccessGrantDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Grant trip access",
    responses={
        201: {"description": "Access granted"},
        400: {"model": ErrorResponse, "description": "Target user is an admin"},
        403: {"model": ErrorResponse, "description": "Admin only"},
        404: {"model": ErrorResponse, "description": "User not found"},
        409: {"model": ErrorResponse, "description": "User already has access"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def grant_access(
    request: Request,
    body: GrantAccessRequest,
    admin: AdminIdentity,
    service: AccessGrantService = Depends(get_access_grant_service),
) -> AccessGrantDetailResponse:
    """Give a user a role on a trip. Admin only."""
    grant = await service.grant(
        user_id=body.user_id,
        resource_id=body.trip_id,
        role=Role(body.role),
        granted_by_user_id=admin.id,
    )
    return AccessGrantDetailResponse(data=AccessGrantResponse.from_entity(grant))


@router.patch(
    "/{grant_id}",
    response_model=AccessGrantDetailResponse,
    summary="Change trip access role",
    responses={
        200: {"description": "Role updated"},
        403: {"model": ErrorResponse, "description": "Admin only"},
        404: {"model": ErrorResponse, "description": "Grant not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_access(
    request: Request,
    grant_id: UUID,
    body: UpdateAccessRequest,
    admin: AdminIdentity,
    service: AccessGrantService = Depends(get_access_grant_service),
) -> AccessGrantDetailResponse:
    """Change the role on an existing grant. Admin only."""
    grant = await service.update_role(grant_id, Role(body.role))
    return AccessGrantDetailResponse(data=AccessGrantResponse.from_entity(grant))


@router.delete(
    "/{grant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke trip access",
    responses={
        204: {"description": "Access revoked"},
        403: {"model": ErrorResponse, "description": "Admin only"},
        404: {"model": ErrorResponse, "description": "Grant not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def revoke_access(
    request: Request,
    grant_id: UUID,
    admin: AdminIdentity,
    service: AccessGrantService = Depends(get_access_grant_service),
) -> None:
    """Remove a grant. Admin only."""
    await service.revoke(grant_id)
    return None


# --- Trip-scoped routes ---


@trips_router.get(
    "/access",
    response_model=TripUserListResponse,
    summary="List users with trip access",
    responses={
        200: {"description": "Grants on the trip, newest first"},
        403: {"model": ErrorResponse, "description": "Admin only"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_trip_access(
    request: Request,
    id: UUID,
    admin: AdminIdentity,
    service: AccessGrantService = Depends(get_access_grant_service),
) -> TripUserListResponse:
    """List everyone holding a grant on a trip. Admin only."""
    rows = await service.list_for_resource(id)
    data = [TripUserResponse.from_joined(row) for row in rows]
    return TripUserListResponse(data=data, meta={"total": len(data)})


@trips_router.get(
    "/role",
    response_model=TripRoleResponse,
    summary="Get my role on a trip",
    responses={
        200: {"description": "Caller's effective role"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "No access to this trip"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_trip_role(
    request: Request,
    access: RequireViewer,
) -> TripRoleResponse:
    """Report the role the caller holds on a trip. Admins report ``admin``."""
    if access.resource_id is None:
        raise ValidationError("Invalid trip ID format")

    role = "admin" if access.identity.is_admin else (access.role or Role.VIEWER).value
    return TripRoleResponse(trip_id=access.resource_id, role=role)  # type: ignore[arg-type]


# --- Caller-scoped routes ---


@me_router.get(
    "/access",
    response_model=AccessGrantListResponse,
    summary="List my trip access",
    responses={
        200: {"description": "Caller's grants, newest first"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_my_access(
    request: Request,
    identity: CurrentIdentity,
    service: AccessGrantService = Depends(get_access_grant_service),
) -> AccessGrantListResponse:
    """List the trips the caller has been granted."""
    grants = await service.list_for_user(identity.id)
    data = [AccessGrantResponse.from_entity(grant) for grant in grants]
    return AccessGrantListResponse(data=data, meta={"total": len(data)})


# --- User listing ---


@users_router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    responses={
        200: {"description": "All users, ordered by email"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin only"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_users(
    request: Request,
    admin: AdminIdentity,
    service: AccessGrantService = Depends(get_access_grant_service),
) -> UserListResponse:
    """List every user so an admin can pick whom to grant. Admin only."""
    profiles = await service.list_users()
    data = [UserResponse.from_entity(profile) for profile in profiles]
    return UserListResponse(data=data, meta={"total": len(data)})
