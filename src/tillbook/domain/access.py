"""Role checks for day-entry operations.

Each check runs before any core logic and raises AuthorizationError when the
caller may not proceed.
"""

from typing import Optional

from tillbook.domain.entities import Identity, Role
from tillbook.domain.errors import AuthorizationError


def require_identity(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise AuthorizationError("Not authenticated")
    return identity


def require_role(identity: Optional[Identity], *roles: Role) -> Identity:
    """Return the identity if its role is one of ``roles``."""
    identity = require_identity(identity)
    if identity.role not in roles:
        allowed = ", ".join(r.value for r in roles)
        raise AuthorizationError(
            f"User '{identity.username}' ({identity.role.value}) is not allowed; requires {allowed}"
        )
    return identity


def require_operator(identity: Optional[Identity]) -> str:
    """Return the counter name of a counter operator."""
    identity = require_role(identity, Role.COUNTER)
    if not identity.counter_name:
        raise AuthorizationError(f"User '{identity.username}' has no counter assigned")
    return identity.counter_name


def require_own_counter(identity: Optional[Identity], counter_name: str) -> str:
    """Return ``counter_name`` if the caller operates that counter."""
    own = require_operator(identity)
    if own != counter_name:
        raise AuthorizationError(
            f"User '{identity.username}' operates '{own}', not '{counter_name}'"
        )
    return own


def require_admin(identity: Optional[Identity]) -> Identity:
    return require_role(identity, Role.ADMIN)


def require_viewer(identity: Optional[Identity]) -> Identity:
    """Allow administrators and read-only supervisors."""
    return require_role(identity, Role.ADMIN, Role.SUPERVISOR)
