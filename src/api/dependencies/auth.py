"""Authentication and authorization dependencies for FastAPI.

Each stage is a dependency that either raises a terminal AppException or
returns what it resolved. Later stages receive earlier results through
``Depends`` parameters, so every stage can also be called directly.

    require_authenticated -> Identity
    require_admin          -> Identity (is_admin only)
    optional_authenticated -> Identity | None
    require_resource_role  -> ResourceAccess
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies.services import get_access_grant_service
from core.exceptions import AuthenticationError, AuthorizationError, ErrorCode, ValidationError
from domain.entities.role import Role, parse_role, satisfies
from domain.services.access_grant_service import AccessGrantService
from infrastructure.auth.jwt_provider import JWTCredentialVerifier
from infrastructure.auth.provider import ICredentialVerifier, Identity, InvalidCredentialError

logger = structlog.get_logger()

# Security scheme for OpenAPI docs; scheme match is case-insensitive
security = HTTPBearer(auto_error=False)

# Singleton verifier
_verifier: JWTCredentialVerifier | None = None

TRIP_ACCESS_DENIED = "Access denied to this trip"


def get_credential_verifier() -> ICredentialVerifier:
    """Get or create the credential verifier singleton."""
    global _verifier
    if _verifier is None:
        _verifier = JWTCredentialVerifier()
    return _verifier


def _resolve_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    verifier: ICredentialVerifier,
) -> Identity | None:
    """Verify the bearer token if one was sent. A bad token always fails."""
    if not credentials:
        return None

    token = credentials.credentials.strip()
    if not token:
        return None

    try:
        return verifier.verify(token)
    except InvalidCredentialError as e:
        # Never log the token itself.
        logger.warning(
            "authentication_failed",
            reason=e.reason.value,
            path=request.url.path,
        )
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        ) from e


async def require_authenticated(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    verifier: ICredentialVerifier = Depends(get_credential_verifier),
) -> Identity:
    """
    Dependency to get the current authenticated identity.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    identity = _resolve_identity(request, credentials, verifier)
    if identity is None:
        logger.info("authentication_failed", reason="missing_token", path=request.url.path)
        raise AuthenticationError(message="Missing authentication token")
    return identity


async def require_admin(
    identity: Annotated[Identity, Depends(require_authenticated)],
) -> Identity:
    """
    Dependency that additionally requires the global admin flag.

    Raises:
        AuthorizationError: If the identity is not an admin
    """
    if not identity.is_admin:
        logger.info("admin_required", user_id=str(identity.id))
        raise AuthorizationError("Admin access required")
    return identity


async def optional_authenticated(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    verifier: ICredentialVerifier = Depends(get_credential_verifier),
) -> Identity | None:
    """
    Dependency to get the identity if a token was sent.

    Returns:
        Identity if authenticated, None if no token was sent

    Raises:
        AuthenticationError: If a token was sent but is invalid
    """
    return _resolve_identity(request, credentials, verifier)


# --- Resource-scoped authorization ---

ResourceIdExtractor = Callable[[Request], str | None]


def path_param(name: str = "id") -> ResourceIdExtractor:
    """Build an extractor that reads the trip id from a path parameter."""

    def extract(request: Request) -> str | None:
        return request.path_params.get(name)

    return extract


def _parse_resource_id(raw: str | None) -> UUID | None:
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class ResourceAccess:
    """Outcome of a passed resource check.

    ``role`` is None for admins, whose access doesn't come from a grant.
    """

    identity: Identity
    resource_id: UUID | None
    role: Role | None = None


def require_resource_role(
    min_role: Role,
    resource_id_extractor: ResourceIdExtractor = path_param("id"),
) -> Callable[..., Awaitable[ResourceAccess]]:
    """Build a dependency requiring at least ``min_role`` on the target trip.

    A caller without a grant gets the same 403 as a caller with too low a
    role, whether or not the trip exists.
    """

    async def dependency(
        request: Request,
        identity: Annotated[Identity, Depends(require_authenticated)],
        service: AccessGrantService = Depends(get_access_grant_service),
    ) -> ResourceAccess:
        raw_id = resource_id_extractor(request)

        # Admin bypass comes before any storage read.
        if identity.is_admin:
            return ResourceAccess(identity=identity, resource_id=_parse_resource_id(raw_id))

        resource_id = _parse_resource_id(raw_id)
        if resource_id is None:
            raise ValidationError("Invalid trip ID format")

        stored_role = await service.get_role(identity.id, resource_id)
        if stored_role is None or not satisfies(stored_role, min_role):
            logger.info(
                "resource_access_denied",
                user_id=str(identity.id),
                resource_id=str(resource_id),
                required_role=min_role.value,
            )
            raise AuthorizationError(TRIP_ACCESS_DENIED)

        return ResourceAccess(
            identity=identity,
            resource_id=resource_id,
            role=parse_role(stored_role),
        )

    return dependency


require_editor = require_resource_role(Role.EDITOR)
require_viewer = require_resource_role(Role.VIEWER)


# Type aliases for convenience in route handlers
CurrentIdentity = Annotated[Identity, Depends(require_authenticated)]
AdminIdentity = Annotated[Identity, Depends(require_admin)]
OptionalIdentity = Annotated[Identity | None, Depends(optional_authenticated)]
RequireEditor = Annotated[ResourceAccess, Depends(require_editor)]
RequireViewer = Annotated[ResourceAccess, Depends(require_viewer)]
