"""Trip roles and their ordering."""

from enum import StrEnum

import structlog

logger = structlog.get_logger()


class Role(StrEnum):
    """Per-trip role stored on an access grant.

    Admins are not a role here: their access comes from the global
    ``is_admin`` flag on the identity and never from a grant row.
    """

    VIEWER = "viewer"
    EDITOR = "editor"


# Higher rank = more permissions. Gaps leave room for intermediate roles.
ROLE_RANK: dict[Role, int] = {
    Role.VIEWER: 10,
    Role.EDITOR: 20,
}


def parse_role(value: str | Role) -> Role | None:
    """Map a stored role value to a known ``Role``, or None if unknown."""
    try:
        return Role(value)
    except ValueError:
        return None


def satisfies(granted: str | Role, required: Role) -> bool:
    """Check whether a granted role meets the required minimum.

    Unknown granted values satisfy nothing. They are logged rather than
    raised so a corrupted row denies the request instead of crashing it.
    """
    role = parse_role(granted)
    if role is None or role not in ROLE_RANK:
        logger.warning("unknown_role_denied", granted_role=str(granted), required_role=required.value)
        return False
    return ROLE_RANK[role] >= ROLE_RANK[required]
