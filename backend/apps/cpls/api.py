"""
CPL API endpoints.

Writes are multipart forms so image and audio files travel with the fields.
Every mutation answers with the re-read list of the organization's CPLs.
"""

from uuid import UUID

from ninja import File, Form, Router
from ninja.files import UploadedFile

from apps.core.listing import ListState
from apps.core.schemas import ErrorResponse
from apps.core.security import BearerAuth, get_auth_context
from apps.core.types import AuthenticatedHttpRequest
from apps.cpls.models import Cpl
from apps.cpls.schemas import (
    CplInput,
    CplListResponse,
    CplResponse,
    TargetGroupListResponse,
    TargetGroupResponse,
)
from apps.cpls.services import CplService, MediaUpload

router = Router(tags=["cpls"])
bearer_auth = BearerAuth()

SCOPED_ERRORS = {401: ErrorResponse, 403: ErrorResponse, 409: ErrorResponse, 503: ErrorResponse}
WRITE_ERRORS = {400: ErrorResponse, 404: ErrorResponse, 502: ErrorResponse, **SCOPED_ERRORS}


def _cpl_to_response(cpl: Cpl) -> CplResponse:
    return CplResponse(
        id=cpl.id,
        fecha_inicio=cpl.fecha_inicio,
        fecha_termino=cpl.fecha_termino,
        dia_semana=cpl.dia_semana,
        hora=cpl.hora,
        tipo_cpl=cpl.tipo_cpl,
        mensaje_x_dia=cpl.mensaje_x_dia,
        youtube_url=cpl.youtube_url,
        texto_video=cpl.texto_video,
        imagen_url=cpl.imagen_url,
        imagen_texto=cpl.imagen_texto,
        audio_url=cpl.audio_url,
        audio_texto=cpl.audio_texto,
        destinatario_persona_grupo=cpl.destinatario_persona_grupo,
        created_at=cpl.created_at,
        updated_at=cpl.updated_at,
    )


def _to_upload(file: UploadedFile | None) -> MediaUpload | None:
    if file is None:
        return None
    return MediaUpload(
        filename=file.name or "",
        content=file.read(),
        content_type=file.content_type or "application/octet-stream",
    )


def _refreshed_list(service: CplService) -> CplListResponse:
    """Re-read after a mutation; a failed read is reported, not raised."""
    state: ListState[Cpl] = ListState(service.list_cpls)
    state.refresh()
    return CplListResponse(
        cpls=[_cpl_to_response(c) for c in state.items],
        notice=state.last_error,
    )


@router.get(
    "",
    response={200: CplListResponse, **SCOPED_ERRORS},
    auth=bearer_auth,
    operation_id="listCpls",
    summary="List CPLs",
)
def list_cpls(request: AuthenticatedHttpRequest) -> CplListResponse:
    """List the organization's CPLs, newest first."""
    _, organization = get_auth_context(request).require_organization()
    service = CplService(organization)
    return CplListResponse(cpls=[_cpl_to_response(c) for c in service.list_cpls()])


@router.get(
    "/target-groups",
    response={200: TargetGroupListResponse, **SCOPED_ERRORS},
    auth=bearer_auth,
    operation_id="listCplTargetGroups",
    summary="List recipient groups",
)
def list_target_groups(request: AuthenticatedHttpRequest) -> TargetGroupListResponse:
    """Provisioned groups a CPL can be addressed to."""
    _, organization = get_auth_context(request).require_organization()
    groups = CplService(organization).list_target_groups()
    return TargetGroupListResponse(
        grupos=[TargetGroupResponse(id=g.id, nombre=g.nombre, id_grupo=g.id_grupo) for g in groups]
    )


@router.post(
    "",
    response={201: CplListResponse, **WRITE_ERRORS},
    auth=bearer_auth,
    operation_id="createCpl",
    summary="Create CPL",
)
def create_cpl(
    request: AuthenticatedHttpRequest,
    payload: Form[CplInput],
    imagen: UploadedFile | None = File(None),
    audio: UploadedFile | None = File(None),
) -> tuple[int, CplListResponse]:
    """
    Create a CPL from a multipart form.

    Files are uploaded before the row is written; a failed upload writes
    nothing.
    """
    user, organization = get_auth_context(request).require_organization()
    service = CplService(organization)
    service.upsert_cpl(payload, creator=user, imagen=_to_upload(imagen), audio=_to_upload(audio))
    return 201, _refreshed_list(service)


@router.post(
    "/{cpl_id}",
    response={200: CplListResponse, **WRITE_ERRORS},
    auth=bearer_auth,
    operation_id="updateCpl",
    summary="Update CPL",
)
def update_cpl(
    request: AuthenticatedHttpRequest,
    cpl_id: UUID,
    payload: Form[CplInput],
    imagen: UploadedFile | None = File(None),
    audio: UploadedFile | None = File(None),
) -> CplListResponse:
    """
    Replace a CPL's fields from a multipart form.

    Sent as POST: Django parses multipart bodies only on POST.
    """
    user, organization = get_auth_context(request).require_organization()
    service = CplService(organization)
    service.upsert_cpl(
        payload,
        creator=user,
        editing_id=cpl_id,
        imagen=_to_upload(imagen),
        audio=_to_upload(audio),
    )
    return _refreshed_list(service)


@router.delete(
    "/{cpl_id}",
    response={200: CplListResponse, 404: ErrorResponse, **SCOPED_ERRORS},
    auth=bearer_auth,
    operation_id="deleteCpl",
    summary="Delete CPL",
)
def delete_cpl(request: AuthenticatedHttpRequest, cpl_id: UUID) -> CplListResponse:
    """Delete a CPL of the organization."""
    _, organization = get_auth_context(request).require_organization()
    service = CplService(organization)
    service.delete_cpl(cpl_id)
    return _refreshed_list(service)
