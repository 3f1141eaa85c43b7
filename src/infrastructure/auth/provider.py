"""Credential verifier protocol and the identity it produces."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class Identity:
    """Caller resolved from a bearer token. Never persisted here."""

    id: UUID
    email: str
    is_admin: bool = False


class CredentialFailure(StrEnum):
    """Why a credential was rejected."""

    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
    INVALID_CLAIMS = "invalid_claims"


class InvalidCredentialError(Exception):
    """Raised by a verifier when a token can't be trusted."""

    def __init__(self, reason: CredentialFailure) -> None:
        self.reason = reason
        super().__init__(reason.value)


class ICredentialVerifier(Protocol):
    """Protocol for bearer credential verifiers."""

    def verify(self, token: str) -> Identity:
        """
        Verify a bearer token.

        Args:
            token: The raw bearer token (scheme already stripped)

        Returns:
            The resolved Identity

        Raises:
            InvalidCredentialError: If the token is malformed, forged or expired
        """
        ...
