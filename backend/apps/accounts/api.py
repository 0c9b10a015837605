"""
Accounts API endpoints.

- Session sign-in/sign-out and resolved access (/auth)
- Profile and device linking (/profile)
- Organization user management (/users)
"""

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from ninja import Router
from ninja.errors import HttpError

from apps.accounts.constants import ASSIGNABLE_ROLES
from apps.accounts.linking import DeviceLinkClient, DeviceLinkError
from apps.accounts.models import Profile, UserRole
from apps.accounts.schemas import (
    CreatedUserResponse,
    CreateUserRequest,
    LoginRequest,
    MeResponse,
    OrganizationAccessInfo,
    OrganizationUserListResponse,
    OrganizationUserResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    SessionResponse,
    UserInfo,
)
from apps.accounts.services import (
    authenticate_credentials,
    complete_device_link,
    create_organization_user,
    ensure_profile,
    list_organization_users,
    update_profile,
)
from apps.accounts.sessions import InvalidSessionError, issue_session, revoke_session, verify_session_token
from apps.core.logging import get_logger
from apps.core.schemas import ErrorResponse, MessageResponse
from apps.core.security import BearerAuth, get_auth_context
from apps.core.throttling import check_rate_limit
from apps.core.types import AuthenticatedHttpRequest

logger = get_logger(__name__)

auth_router = Router(tags=["auth"])
profile_router = Router(tags=["profile"])
users_router = Router(tags=["users"])
bearer_auth = BearerAuth()

LOGIN_MAX_ATTEMPTS = 10
LOGIN_WINDOW_SECONDS = 900


def _profile_to_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        nombre=profile.nombre,
        phone=profile.phone,
        vinculado=profile.vinculado,
        default_organization_id=profile.default_organization_id,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


def _membership_to_response(membership: UserRole, profile: Profile | None) -> OrganizationUserResponse:
    return OrganizationUserResponse(
        id=membership.id,
        user_id=membership.user_id,
        email=membership.user.email,
        role=membership.role,
        nombre=profile.nombre if profile else None,
        vinculado=profile.vinculado if profile else False,
        created_at=membership.created_at,
    )


# --- Session ---


@auth_router.post(
    "/login",
    response={200: SessionResponse, 401: ErrorResponse, 429: ErrorResponse},
    operation_id="login",
    summary="Sign in with email and password",
)
def login(request: HttpRequest, payload: LoginRequest) -> SessionResponse:
    """Exchange credentials for a session credential."""
    check_rate_limit(
        f"login:{payload.email.lower()}",
        max_requests=LOGIN_MAX_ATTEMPTS,
        window_seconds=LOGIN_WINDOW_SECONDS,
    )

    user = authenticate_credentials(payload.email, payload.password)
    if user is None:
        logger.info("login_failed", email=payload.email)
        raise HttpError(401, "Invalid email or password")

    session = issue_session(user)
    logger.info("login_succeeded", user_id=session.user_id)
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        credential=session.credential,
        expires_at=session.expires_at,
    )


@auth_router.post(
    "/logout",
    response={200: MessageResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="logout",
    summary="Revoke current session",
)
def logout(request: HttpRequest) -> MessageResponse:
    """
    Revoke the session in the Authorization header.

    An already invalid session still logs out successfully.
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        raise HttpError(401, "No session provided")

    try:
        claims = verify_session_token(auth_header.removeprefix("Bearer ").strip())
        revoke_session(claims)
    except InvalidSessionError:
        logger.debug("logout_invalid_session")

    return MessageResponse(message="Sesión cerrada exitosamente")


@auth_router.get(
    "/me",
    response={200: MeResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=bearer_auth,
    operation_id="getCurrentUser",
    summary="Get current user and resolved access",
)
def me(request: AuthenticatedHttpRequest) -> MeResponse:
    """
    Return role, accessible organizations and the selected organization.

    Send X-Organization-Id to switch organization; the default is the
    profile's default organization, then the earliest membership.
    """
    context = get_auth_context(request)
    user = context.require_user()

    selected = None
    if context.organization is not None:
        selected = next(
            (
                OrganizationAccessInfo(**m)
                for m in context.organizations
                if m["organization_id"] == str(context.organization.id)
            ),
            None,
        )

    return MeResponse(
        user=UserInfo(id=str(user.id), email=user.email),
        role=context.role,
        organizations=[OrganizationAccessInfo(**m) for m in context.organizations],
        selected_organization=selected,
        notice=context.notice,
    )


# --- Profile ---


@profile_router.get(
    "",
    response={200: ProfileResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="getProfile",
    summary="Get (or create) the current profile",
)
def get_profile(request: AuthenticatedHttpRequest) -> ProfileResponse:
    """Return the profile, creating it on first access."""
    user = get_auth_context(request).require_user()
    return _profile_to_response(ensure_profile(user))


@profile_router.patch(
    "",
    response={200: ProfileResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=bearer_auth,
    operation_id="updateProfile",
    summary="Update the current profile",
)
def patch_profile(request: AuthenticatedHttpRequest, payload: ProfileUpdateRequest) -> ProfileResponse:
    """Update nombre, phone or default organization."""
    context = get_auth_context(request)
    return _profile_to_response(update_profile(context, payload))


@profile_router.get(
    "/link/qr",
    response={502: ErrorResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="getDeviceLinkQr",
    summary="Get a device link QR image",
)
def get_link_qr(request: AuthenticatedHttpRequest) -> HttpResponse:
    """Proxy a fresh QR image from the messaging API."""
    get_auth_context(request).require_user()
    try:
        qr = DeviceLinkClient().fetch_qr()
    except DeviceLinkError as e:
        raise HttpError(502, "Error al generar el código QR") from e
    return HttpResponse(qr.content, content_type=qr.content_type)


@profile_router.post(
    "/link/complete",
    response={200: ProfileResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="completeDeviceLink",
    summary="Mark the device as linked",
)
def complete_link(request: AuthenticatedHttpRequest) -> ProfileResponse:
    """Mark the profile vinculado after the QR was scanned."""
    user = get_auth_context(request).require_user()
    return _profile_to_response(complete_device_link(user, api_key=settings.DEVICE_LINK_API_KEY))


# --- Organization users ---


@users_router.get(
    "",
    response={200: OrganizationUserListResponse, 401: ErrorResponse, 403: ErrorResponse, 409: ErrorResponse},
    auth=bearer_auth,
    operation_id="listOrganizationUsers",
    summary="List users of the selected organization",
)
def list_users(request: AuthenticatedHttpRequest) -> OrganizationUserListResponse:
    """
    List memberships of the selected organization.

    Requires admin or super admin.
    """
    _, organization = get_auth_context(request).require_admin()
    rows = list_organization_users(organization)
    return OrganizationUserListResponse(users=[_membership_to_response(m, p) for m, p in rows])


@users_router.post(
    "",
    response={
        201: CreatedUserResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        409: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="createOrganizationUser",
    summary="Add a user to the selected organization",
)
def create_user(
    request: AuthenticatedHttpRequest,
    payload: CreateUserRequest,
) -> tuple[int, CreatedUserResponse]:
    """
    Create (or attach) a user with a role in the selected organization.

    Requires admin or super admin. Only admin and user roles can be assigned.
    """
    user, organization = get_auth_context(request).require_admin()
    if payload.role not in ASSIGNABLE_ROLES:
        raise HttpError(400, "Role must be admin or user")

    created = create_organization_user(organization, payload.email, payload.role, created_by=user)
    base = _membership_to_response(created.membership, None)
    return 201, CreatedUserResponse(
        **base.model_dump(),
        temporary_password=created.temporary_password,
    )
