"""JWT credential verifier.

Tokens are issued by the account service and signed with a shared secret.
Payload structure:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "isAdmin": false,
        "iat": 1234567800,
        "exp": 1234567890
    }
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from core.config import settings
from infrastructure.auth.provider import CredentialFailure, Identity, InvalidCredentialError


class JWTCredentialVerifier:
    """Verifies HS256 (or configured algorithm) bearer tokens.

    Pure function of the token and the current time: no storage access.
    """

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    def verify(self, token: str) -> Identity:
        """
        Validate a JWT and extract the caller's identity.

        Args:
            token: The JWT to validate

        Returns:
            Identity built from the ``sub``, ``email`` and ``isAdmin`` claims

        Raises:
            InvalidCredentialError: With the failure reason
        """
        try:
            jwt.get_unverified_header(token)
        except JWTError as e:
            raise InvalidCredentialError(CredentialFailure.MALFORMED) from e

        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except ExpiredSignatureError as e:
            raise InvalidCredentialError(CredentialFailure.EXPIRED) from e
        except JWTClaimsError as e:
            raise InvalidCredentialError(CredentialFailure.INVALID_CLAIMS) from e
        except JWTError as e:
            raise InvalidCredentialError(CredentialFailure.INVALID_SIGNATURE) from e

        subject = payload.get("sub")
        email = payload.get("email")
        if not subject or not isinstance(email, str) or not email:
            raise InvalidCredentialError(CredentialFailure.INVALID_CLAIMS)

        try:
            user_id = UUID(str(subject))
        except ValueError as e:
            raise InvalidCredentialError(CredentialFailure.INVALID_CLAIMS) from e

        return Identity(
            id=user_id,
            email=email,
            is_admin=payload.get("isAdmin") is True,
        )

    def create_token(self, identity: Identity, expires_in: timedelta | None = None) -> str:
        """
        Sign a token for an identity (used by the account service and tests).

        Args:
            identity: The identity to encode
            expires_in: Lifetime; negative values produce an already-expired token

        Returns:
            The encoded JWT string
        """
        now = datetime.now(UTC)
        lifetime = expires_in if expires_in is not None else timedelta(minutes=self._expire_minutes)

        payload: dict[str, Any] = {
            "sub": str(identity.id),
            "email": identity.email,
            "isAdmin": identity.is_admin,
            "iat": now,
            "exp": now + lifetime,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
