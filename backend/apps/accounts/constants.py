"""
Role identifiers.
"""

from enum import StrEnum


class Role(StrEnum):
    """
    Access tiers.

    SUPER_ADMIN is global (granted by a membership row without organization);
    ADMIN and USER are scoped to one organization.
    """

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    USER = "user"


# Roles an admin may assign inside an organization
ASSIGNABLE_ROLES = (Role.ADMIN, Role.USER)
