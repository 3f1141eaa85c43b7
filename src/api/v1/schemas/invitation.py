"""Pydantic schemas for Invitation API."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.invitation import Invitation


class CreateInvitationRequest(BaseModel):
    """Schema for issuing a trip invitation."""

    email: str | None = Field(None, min_length=3, max_length=255)
    role: Literal["editor", "viewer"] = "viewer"
    trip_ids: list[UUID] = Field(..., min_length=1)
    ttl_seconds: int | None = Field(
        None,
        description="Lifetime override. Defaults to seven days.",
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        """Basic email validation."""
        if v is None:
            return v
        v = v.strip().lower()
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Invalid email address")
        return v


class RedeemInvitationRequest(BaseModel):
    """Schema for redeeming an invitation code."""

    code: str = Field(..., min_length=16, max_length=64)


class InvitationResponse(BaseModel):
    """Schema for Invitation response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "code": "q0mPZ1n3vV7c2wXb8r9sTt4uYyKk6LdA",
                "email": "friend@example.com",
                "role": "editor",
                "status": "pending",
                "trip_ids": ["456e4567-e89b-12d3-a456-426614174000"],
                "created_by_user_id": "789e4567-e89b-12d3-a456-426614174000",
                "created_at": "2026-02-01T10:00:00",
                "expires_at": "2026-02-08T10:00:00",
            }
        },
    )

    id: UUID
    code: str
    email: str | None = None
    role: str
    status: str
    trip_ids: list[UUID] = Field(default_factory=list)
    created_by_user_id: UUID
    created_at: datetime
    expires_at: datetime
    used_at: datetime | None = None
    used_by_user_id: UUID | None = None

    @classmethod
    def from_entity(cls, invitation: Invitation) -> "InvitationResponse":
        return cls(
            id=invitation.id,
            code=invitation.code,
            email=invitation.email,
            role=invitation.role.value,
            status=invitation.status().value,
            trip_ids=invitation.resource_ids,
            created_by_user_id=invitation.created_by_user_id,
            created_at=invitation.created_at,
            expires_at=invitation.expires_at,
            used_at=invitation.used_at,
            used_by_user_id=invitation.used_by_user_id,
        )


class InvitationCreatedResponse(BaseModel):
    """Schema for invitation creation response."""

    data: InvitationResponse
    trip_ids: list[UUID]


class InvitationListResponse(BaseModel):
    """Schema for list of Invitations response."""

    data: list[InvitationResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class InvitationValidationResponse(BaseModel):
    """Schema for the public validate endpoint.

    Only ``valid`` and ``reason`` are set when the code can't be redeemed.
    """

    valid: bool
    reason: str | None = None
    message: str | None = None
    role: str | None = None
    trip_ids: list[UUID] = Field(default_factory=list)
    email: str | None = None
    expires_at: datetime | None = None
