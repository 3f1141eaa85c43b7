"""Pydantic schemas for trip access API."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.access_grant import AccessGrant, AccessGrantWithUser
from domain.entities.profile import Profile


class GrantAccessRequest(BaseModel):
    """Schema for granting a user access to a trip."""

    user_id: UUID
    trip_id: UUID
    role: Literal["editor", "viewer"] = "viewer"


class UpdateAccessRequest(BaseModel):
    """Schema for changing the role on a grant."""

    role: Literal["editor", "viewer"]


class AccessGrantResponse(BaseModel):
    """Schema for AccessGrant response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "456e4567-e89b-12d3-a456-426614174000",
                "trip_id": "789e4567-e89b-12d3-a456-426614174000",
                "role": "editor",
                "granted_by_user_id": "abce4567-e89b-12d3-a456-426614174000",
                "granted_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    user_id: UUID
    trip_id: UUID
    role: str
    granted_by_user_id: UUID | None = None
    granted_at: datetime

    @classmethod
    def from_entity(cls, grant: AccessGrant) -> "AccessGrantResponse":
        return cls(
            id=grant.id,
            user_id=grant.user_id,
            trip_id=grant.resource_id,
            role=grant.role.value,
            granted_by_user_id=grant.granted_by_user_id,
            granted_at=grant.granted_at,
        )


class TripUserResponse(AccessGrantResponse):
    """Grant on a trip, with the grantee's profile fields."""

    email: str
    display_name: str | None = None

    @classmethod
    def from_joined(cls, row: AccessGrantWithUser) -> "TripUserResponse":
        base = AccessGrantResponse.from_entity(row.grant)
        return cls(**base.model_dump(), email=row.email, display_name=row.display_name)


class AccessGrantDetailResponse(BaseModel):
    """Schema for single AccessGrant response."""

    data: AccessGrantResponse


class AccessGrantListResponse(BaseModel):
    """Schema for list of AccessGrants response."""

    data: list[AccessGrantResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class TripUserListResponse(BaseModel):
    """Schema for users with access to a trip."""

    data: list[TripUserResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class TripRoleResponse(BaseModel):
    """The caller's effective role on a trip."""

    trip_id: UUID
    role: Literal["admin", "editor", "viewer"]


class UserResponse(BaseModel):
    """A user an admin can grant trip access to."""

    id: UUID
    email: str
    display_name: str | None = None
    is_admin: bool

    @classmethod
    def from_entity(cls, profile: Profile) -> "UserResponse":
        return cls(
            id=profile.id,
            email=profile.email,
            display_name=profile.display_name,
            is_admin=profile.is_admin,
        )


class UserListResponse(BaseModel):
    """Schema for the admin user listing."""

    data: list[UserResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
