"""CLI helpers for resolving the caller's identity."""

from tillbook.domain.entities import Identity, Role


def identity_from_options(
    user: str | None, role: str | None, counter_name: str | None
) -> Identity | None:
    """Build the caller identity from global options.

    Without a role there is no identity and every action is rejected as
    unauthenticated. The user name defaults to the counter name, then the
    role.
    """
    if not role:
        return None
    role = Role(role)
    username = user or counter_name or role.value
    return Identity(username=username, role=role, counter_name=counter_name)
