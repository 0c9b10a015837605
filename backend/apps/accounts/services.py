"""
Accounts services - access resolution, profiles and user management.

Access resolution:
    1. A global super admin gets role super_admin and every active
       organization, whatever user_roles rows exist for them.
    2. Anyone else gets the organizations joined through user_roles, earliest
       membership first; the role of that first membership is their role.
    3. No memberships: role user, no organizations, nothing selected.
    4. A failed lookup degrades to case 3 with a notice instead of raising.
"""

import secrets
from dataclasses import dataclass, field
from typing import Any

from django.contrib.auth import authenticate
from django.db import transaction

from apps.accounts.constants import Role
from apps.accounts.models import Profile, User, UserRole
from apps.accounts.schemas import ProfileUpdateRequest
from apps.core.auth import AuthContext
from apps.core.exceptions import CplManagerError, InputValidationError, PersistenceError
from apps.core.gateway import OrganizationMembership, PersistenceGateway
from apps.core.logging import get_logger
from apps.organizations.models import Organization

logger = get_logger(__name__)

ACCESS_LOOKUP_NOTICE = "No se pudieron cargar las organizaciones"


class OrganizationAccessError(CplManagerError):
    """The requested organization is not accessible to the user."""

    pass


@dataclass
class AccessResolution:
    """Role and organizations an identity may act within."""

    role: str = Role.USER
    organizations: list[OrganizationMembership] = field(default_factory=list)
    error: str | None = None

    @property
    def first_organization(self) -> OrganizationMembership | None:
        return self.organizations[0] if self.organizations else None


@dataclass
class CreatedUser:
    """Result of adding a user to an organization."""

    user: User
    membership: UserRole
    temporary_password: str | None


def resolve_access(user_id: Any, gateway: PersistenceGateway | None = None) -> AccessResolution:
    """Resolve role and accessible organizations. Never raises on lookup failure."""
    gateway = gateway or PersistenceGateway()
    try:
        if gateway.is_super_admin(user_id):
            return AccessResolution(
                role=Role.SUPER_ADMIN,
                organizations=gateway.list_active_organizations(),
            )

        organizations = gateway.get_user_organizations(user_id)
    except PersistenceError as e:
        logger.warning("access_resolution_failed", user_id=str(user_id), error=str(e))
        return AccessResolution(error=ACCESS_LOOKUP_NOTICE)

    if not organizations:
        return AccessResolution(role=Role.USER, organizations=[])

    return AccessResolution(role=organizations[0]["user_role"], organizations=organizations)


def select_organization(
    resolution: AccessResolution,
    requested_id: str | None = None,
    default_id: str | None = None,
) -> OrganizationMembership | None:
    """
    Pick the organization a request acts within.

    Order: the explicitly requested organization, the profile default when it
    is still accessible, then the first resolved organization.

    Raises:
        OrganizationAccessError: If requested_id is not accessible
    """
    by_id = {m["organization_id"]: m for m in resolution.organizations}

    if requested_id:
        membership = by_id.get(str(requested_id))
        if membership is None:
            raise OrganizationAccessError("Organization not accessible")
        return membership

    if default_id and str(default_id) in by_id:
        return by_id[str(default_id)]

    return resolution.first_organization


def build_auth_context(
    user: User,
    requested_organization_id: str | None = None,
    gateway: PersistenceGateway | None = None,
) -> AuthContext:
    """Resolve access for a user and select the organization for this request."""
    gateway = gateway or PersistenceGateway()
    resolution = resolve_access(user.id, gateway)

    default_id = None
    if not requested_organization_id and resolution.organizations:
        try:
            profile = gateway.get_first("profiles", {"user_id": user.id})
        except PersistenceError:
            profile = None
        if profile is not None and profile.default_organization_id:
            default_id = str(profile.default_organization_id)

    selected = select_organization(resolution, requested_organization_id, default_id)

    organization = None
    role = resolution.role
    notice = resolution.error
    if selected is not None:
        try:
            organization = gateway.get("organizations", selected["organization_id"])
        except PersistenceError as e:
            logger.warning(
                "organization_lookup_failed",
                user_id=str(user.id),
                organization_id=selected["organization_id"],
                error=str(e),
            )
            notice = ACCESS_LOOKUP_NOTICE
            if resolution.role != Role.SUPER_ADMIN:
                role = Role.USER
        else:
            if resolution.role != Role.SUPER_ADMIN:
                role = selected["user_role"]

    return AuthContext(
        user=user,
        role=role,
        organization=organization,
        organizations=resolution.organizations,
        notice=notice,
    )


def authenticate_credentials(email: str, password: str) -> User | None:
    """Check email and password; None when they do not match an active user."""
    user = authenticate(username=email, password=password)
    if user is None or not user.is_active:
        return None
    return user


# --- Profiles ---


def ensure_profile(user: User, gateway: PersistenceGateway | None = None) -> Profile:
    """Return the user's profile, creating an unlinked one on first access."""
    gateway = gateway or PersistenceGateway()
    profile = gateway.get_first("profiles", {"user_id": user.id})
    if profile is not None:
        return profile

    profile = gateway.insert("profiles", {"user_id": user.id, "vinculado": False})
    logger.info("profile_created", user_id=str(user.id))
    return profile


def update_profile(
    context: AuthContext,
    data: ProfileUpdateRequest,
    gateway: PersistenceGateway | None = None,
) -> Profile:
    """
    Update editable profile fields.

    Raises:
        OrganizationAccessError: If the default organization is not accessible
    """
    gateway = gateway or PersistenceGateway()
    user = context.require_user()
    profile = ensure_profile(user, gateway)

    patch: dict[str, Any] = data.model_dump(exclude_unset=True)
    if patch.get("default_organization_id") is not None:
        accessible = {m["organization_id"] for m in context.organizations}
        if str(patch["default_organization_id"]) not in accessible:
            raise OrganizationAccessError("Organization not accessible")

    if not patch:
        return profile
    return gateway.update("profiles", profile.id, patch)


def complete_device_link(user: User, api_key: str, gateway: PersistenceGateway | None = None) -> Profile:
    """Mark the profile as linked and store the messaging API key."""
    gateway = gateway or PersistenceGateway()
    profile = ensure_profile(user, gateway)
    nombre = user.email.split("@")[0] or "Usuario"
    profile = gateway.update(
        "profiles",
        profile.id,
        {"vinculado": True, "api_key": api_key, "nombre": nombre},
    )
    logger.info("device_link_completed", user_id=str(user.id))
    return profile


# --- Organization users ---


def list_organization_users(
    organization: Organization,
    gateway: PersistenceGateway | None = None,
) -> list[tuple[UserRole, Profile | None]]:
    """Memberships of an organization, newest first, each with the member's profile."""
    gateway = gateway or PersistenceGateway()
    memberships = gateway.select(
        "user_roles",
        {"organization_id": organization.id},
        order=["-created_at"],
    )
    profiles = {
        p.user_id: p
        for p in gateway.select("profiles", {"user_id__in": [m.user_id for m in memberships]})
    }
    return [(m, profiles.get(m.user_id)) for m in memberships]


def create_organization_user(
    organization: Organization,
    email: str,
    role: str,
    created_by: User,
) -> CreatedUser:
    """
    Add a user with a role to an organization.

    A new identity gets a one-time temporary password; an existing identity
    just gains the membership.

    Raises:
        InputValidationError: If the user already belongs to the organization
    """
    email = User.objects.normalize_email(email.strip())
    temporary_password = None

    with transaction.atomic():
        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            temporary_password = secrets.token_urlsafe(12)
            user = User.objects.create_user(email=email, password=temporary_password)
        elif UserRole.objects.filter(user=user, organization=organization).exists():
            raise InputValidationError("El usuario ya pertenece a esta organización")

        membership = UserRole.objects.create(user=user, organization=organization, role=role)

    logger.info(
        "organization_user_created",
        organization_id=str(organization.id),
        user_id=str(user.id),
        role=role,
        created_by=str(created_by.id),
        new_identity=temporary_password is not None,
    )
    return CreatedUser(user=user, membership=membership, temporary_password=temporary_password)
