"""
Organization API endpoints.

Super admins list and create tenants.
"""

from ninja import Router

from apps.core.schemas import ErrorResponse
from apps.core.security import BearerAuth, get_auth_context
from apps.core.types import AuthenticatedHttpRequest
from apps.organizations.models import Organization
from apps.organizations.schemas import (
    OrganizationCreate,
    OrganizationListResponse,
    OrganizationResponse,
)
from apps.organizations.services import create_organization, list_organizations

router = Router(tags=["organizations"])
bearer_auth = BearerAuth()


def _organization_to_response(organization: Organization) -> OrganizationResponse:
    return OrganizationResponse(
        id=organization.id,
        name=organization.name,
        status=organization.status,
        whatsapp_phone_number=organization.whatsapp_phone_number,
        created_at=organization.created_at,
        updated_at=organization.updated_at,
    )


@router.get(
    "",
    response={200: OrganizationListResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=bearer_auth,
    operation_id="listOrganizations",
    summary="List organizations",
)
def list_all(request: AuthenticatedHttpRequest) -> OrganizationListResponse:
    """
    List every organization, newest first.

    Requires super admin.
    """
    get_auth_context(request).require_super_admin()
    return OrganizationListResponse(
        organizations=[_organization_to_response(org) for org in list_organizations()]
    )


@router.post(
    "",
    response={201: OrganizationResponse, 400: ErrorResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=bearer_auth,
    operation_id="createOrganization",
    summary="Create organization",
)
def create(
    request: AuthenticatedHttpRequest,
    payload: OrganizationCreate,
) -> tuple[int, OrganizationResponse]:
    """
    Create a new active organization.

    Requires super admin.
    """
    get_auth_context(request).require_super_admin()
    organization = create_organization(payload)
    return 201, _organization_to_response(organization)
