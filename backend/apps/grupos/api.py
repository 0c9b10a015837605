"""
Grupos API endpoints.

All operations act within the selected organization.
"""

from uuid import UUID

from django.conf import settings
from ninja import Router

from apps.core.schemas import ErrorResponse, MessageResponse
from apps.core.security import BearerAuth, get_auth_context
from apps.core.types import AuthenticatedHttpRequest
from apps.grupos.models import Grupo
from apps.grupos.schemas import (
    GroupCreate,
    GroupCreatedResponse,
    GroupListResponse,
    GroupResponse,
    GroupUpdate,
)
from apps.grupos.services import GroupProvisioningWorkflow

router = Router(tags=["grupos"])
bearer_auth = BearerAuth()

SCOPED_ERRORS = {401: ErrorResponse, 403: ErrorResponse, 409: ErrorResponse, 503: ErrorResponse}


def _group_to_response(group: Grupo) -> GroupResponse:
    return GroupResponse(
        id=group.id,
        nombre=group.nombre,
        id_grupo=group.id_grupo,
        estado=group.estado,
        numeros_whatsapp=group.numeros_whatsapp,
        created_at=group.created_at,
        updated_at=group.updated_at,
    )


@router.get(
    "",
    response={200: GroupListResponse, **SCOPED_ERRORS},
    auth=bearer_auth,
    operation_id="listGroups",
    summary="List groups",
)
def list_groups(request: AuthenticatedHttpRequest) -> GroupListResponse:
    """List the organization's groups, newest first."""
    _, organization = get_auth_context(request).require_organization()
    groups = GroupProvisioningWorkflow(organization).list_groups()
    return GroupListResponse(grupos=[_group_to_response(g) for g in groups])


@router.post(
    "",
    response={201: GroupCreatedResponse, 400: ErrorResponse, **SCOPED_ERRORS},
    auth=bearer_auth,
    operation_id="createGroup",
    summary="Create group",
)
def create_group(request: AuthenticatedHttpRequest, payload: GroupCreate) -> tuple[int, GroupCreatedResponse]:
    """
    Create a group and request provisioning.

    The group is returned as "Creando..." unless provisioning answered with a
    JID in time. Re-read the list after refresh_after_seconds.
    """
    user, organization = get_auth_context(request).require_organization()
    group = GroupProvisioningWorkflow(organization).create_group(
        payload.nombre,
        payload.numeros_whatsapp,
        creator=user,
    )
    return 201, GroupCreatedResponse(
        grupo=_group_to_response(group),
        refresh_after_seconds=settings.GROUP_REFRESH_DELAY_SECONDS,
    )


@router.patch(
    "/{group_id}",
    response={200: GroupResponse, 400: ErrorResponse, 404: ErrorResponse, **SCOPED_ERRORS},
    auth=bearer_auth,
    operation_id="updateGroup",
    summary="Rename group",
)
def update_group(request: AuthenticatedHttpRequest, group_id: UUID, payload: GroupUpdate) -> GroupResponse:
    """Rename a group of the organization."""
    _, organization = get_auth_context(request).require_organization()
    group = GroupProvisioningWorkflow(organization).update_group(group_id, payload.nombre)
    return _group_to_response(group)


@router.delete(
    "/{group_id}",
    response={200: MessageResponse, 404: ErrorResponse, **SCOPED_ERRORS},
    auth=bearer_auth,
    operation_id="deleteGroup",
    summary="Delete group",
)
def delete_group(request: AuthenticatedHttpRequest, group_id: UUID) -> MessageResponse:
    """Delete a group. CPLs addressed to it lose their recipient."""
    _, organization = get_auth_context(request).require_organization()
    GroupProvisioningWorkflow(organization).delete_group(group_id)
    return MessageResponse(message="Grupo eliminado exitosamente")
