"""
Authentication context for request lifecycle.

Provides a typed container for the authenticated identity and the access
resolution computed for it: role, accessible organizations and the
organization the request acts within.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ninja.errors import HttpError

from apps.accounts.constants import Role

if TYPE_CHECKING:
    from apps.accounts.models import User
    from apps.core.gateway import OrganizationMembership
    from apps.organizations.models import Organization


@dataclass
class AuthContext:
    """
    Authentication context resolved for a request.

    Attributes:
        user: The authenticated User, or None if not authenticated
        role: Effective role (super_admin, admin or user)
        organization: The Organization the request acts within, or None
        organizations: Organizations the user may act within
        notice: Non-fatal message when access resolution degraded
        failed: True if auth was attempted but failed (vs just not present)
    """

    user: "User | None" = None
    role: str = Role.USER
    organization: "Organization | None" = None
    organizations: "list[OrganizationMembership]" = field(default_factory=list)
    notice: str | None = None
    failed: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    @property
    def can_manage_users(self) -> bool:
        return self.role in (Role.SUPER_ADMIN, Role.ADMIN)

    def require_user(self) -> "User":
        """
        Get the authenticated user or raise 401.

        Raises:
            HttpError 401: If not authenticated
        """
        if self.user is None:
            raise HttpError(401, "Not authenticated")
        return self.user

    def require_organization(self) -> tuple["User", "Organization"]:
        """
        Get user and selected organization for scoped operations.

        Raises:
            HttpError 401: If not authenticated
            HttpError 409: If the user has no organization to act within
        """
        user = self.require_user()
        if self.organization is None:
            raise HttpError(409, "No organization selected")
        return user, self.organization

    def require_admin(self) -> tuple["User", "Organization"]:
        """
        Get user and organization, verifying admin or super_admin role.

        Raises:
            HttpError 401: If not authenticated
            HttpError 403: If not an admin
            HttpError 409: If no organization is selected
        """
        user, organization = self.require_organization()
        if not self.can_manage_users:
            raise HttpError(403, "Admin access required")
        return user, organization

    def require_super_admin(self) -> "User":
        """
        Get the user, verifying the global super_admin role.

        Raises:
            HttpError 401: If not authenticated
            HttpError 403: If not a super admin
        """
        user = self.require_user()
        if not self.is_super_admin:
            raise HttpError(403, "Super admin access required")
        return user
