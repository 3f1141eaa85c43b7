"""SQLAlchemy ORM models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from core.clock import utcnow


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserProfileModel(Base):
    """User profile model (owned by the account service)."""

    __tablename__ = "user_profiles"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String(100))
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    access_grants: Mapped[list["AccessGrantModel"]] = relationship(
        "AccessGrantModel",
        back_populates="user",
        foreign_keys="AccessGrantModel.user_id",
        cascade="all, delete-orphan",
    )


class AccessGrantModel(Base):
    """Per-trip permission. Admins never have rows here."""

    __tablename__ = "access_grants"
    __table_args__ = (
        UniqueConstraint("user_id", "resource_id", name="uq_access_grants_user_resource"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resource_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("role IN ('editor', 'viewer')", name="ck_access_grants_role"),
        nullable=False,
    )
    granted_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    granted_by_user_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("user_profiles.id", ondelete="SET NULL"),
    )

    # Relationships
    user: Mapped["UserProfileModel"] = relationship(
        "UserProfileModel",
        back_populates="access_grants",
        foreign_keys=[user_id],
    )


class InvitationModel(Base):
    """Single-use invitation model."""

    __tablename__ = "invitations"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    created_by_user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str | None] = mapped_column(String(255), index=True)
    role: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("role IN ('editor', 'viewer')", name="ck_invitations_role"),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(DateTime)
    used_by_user_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("user_profiles.id", ondelete="SET NULL"),
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    # Relationships
    resources: Mapped[list["InvitationResourceModel"]] = relationship(
        "InvitationResourceModel",
        back_populates="invitation",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class InvitationResourceModel(Base):
    """Trips an invitation grants on redemption (composite PK)."""

    __tablename__ = "invitation_resources"

    invitation_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("invitations.id", ondelete="CASCADE"),
        primary_key=True,
    )
    resource_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        index=True,
    )

    # Relationships
    invitation: Mapped["InvitationModel"] = relationship(
        "InvitationModel",
        back_populates="resources",
    )
