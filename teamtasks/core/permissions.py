"""
Permission system for role-based access control (RBAC) inside a team.

A member's role comes from the invitation they accepted. The team owner is
treated as an admin who may also delete the team.
"""

from enum import Enum
from typing import Dict, Set, Tuple


class TeamRole(str, Enum):
    """Roles a team invitation can grant"""
    ADMIN = "admin"      # Manages the team, its invitations and activities
    MANAGER = "manager"  # Plans and assigns activities
    MEMBER = "member"    # Read access


class Resource(str, Enum):
    """Resources that can be accessed"""
    TEAM = "team"
    INVITATION = "invitation"
    ACTIVITY = "activity"


class Action(str, Enum):
    """Actions that can be performed on resources"""
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ASSIGN = "assign"


# Permission matrix for team roles
ROLE_PERMISSIONS: Dict[TeamRole, Set[Tuple[Resource, Action]]] = {
    TeamRole.ADMIN: {
        (Resource.TEAM, Action.READ),
        (Resource.TEAM, Action.UPDATE),
        (Resource.INVITATION, Action.READ),
        (Resource.INVITATION, Action.CREATE),
        (Resource.ACTIVITY, Action.READ),
        (Resource.ACTIVITY, Action.CREATE),
        (Resource.ACTIVITY, Action.UPDATE),
        (Resource.ACTIVITY, Action.DELETE),
        (Resource.ACTIVITY, Action.ASSIGN),
    },
    TeamRole.MANAGER: {
        (Resource.TEAM, Action.READ),
        (Resource.INVITATION, Action.READ),
        (Resource.ACTIVITY, Action.READ),
        (Resource.ACTIVITY, Action.CREATE),
        (Resource.ACTIVITY, Action.UPDATE),
        (Resource.ACTIVITY, Action.ASSIGN),
    },
    TeamRole.MEMBER: {
        (Resource.TEAM, Action.READ),
        (Resource.INVITATION, Action.READ),
        (Resource.ACTIVITY, Action.READ),
    },
}

OWNER_PERMISSIONS: Set[Tuple[Resource, Action]] = ROLE_PERMISSIONS[TeamRole.ADMIN] | {
    (Resource.TEAM, Action.UPDATE),
    (Resource.TEAM, Action.DELETE),
}


def has_permission(
    role: TeamRole,
    resource: Resource,
    action: Action,
    is_owner: bool = False
) -> bool:
    """
    Check if a role has permission to perform an action on a resource.

    Args:
        role: Team role (ADMIN, MANAGER, MEMBER)
        resource: Resource being accessed
        action: Action being performed
        is_owner: Whether the caller owns the team

    Returns:
        True if permission is granted, False otherwise
    """
    if is_owner:
        return (resource, action) in OWNER_PERMISSIONS
    return (resource, action) in ROLE_PERMISSIONS.get(role, set())
