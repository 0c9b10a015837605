"""
CPL API schemas.
"""

from datetime import date, datetime, time
from uuid import UUID

from ninja import Schema
from pydantic import Field

from apps.cpls.constants import DiaSemana


class CplInput(Schema):
    """
    Fields of a CPL form submission.

    tipo_cpl is checked by the service so an empty or unknown selection is
    reported as a 400 rather than a schema error.
    """

    fecha_inicio: date
    fecha_termino: date
    dia_semana: DiaSemana
    hora: time = Field(..., examples=["09:30"])
    tipo_cpl: list[str] = Field(default_factory=list, examples=[["texto", "imagen"]])
    mensaje_x_dia: str | None = None
    youtube_url: str | None = Field(default=None, max_length=500)
    texto_video: str | None = None
    imagen_texto: str | None = None
    audio_texto: str | None = None
    destinatario_persona_grupo: str | None = Field(
        default=None,
        description="id_grupo of a provisioned group of the organization",
    )


class CplResponse(Schema):
    """CPL record."""

    id: UUID
    fecha_inicio: date
    fecha_termino: date
    dia_semana: str
    hora: time
    tipo_cpl: list[str]
    mensaje_x_dia: str | None = None
    youtube_url: str | None = None
    texto_video: str | None = None
    imagen_url: str | None = None
    imagen_texto: str | None = None
    audio_url: str | None = None
    audio_texto: str | None = None
    destinatario_persona_grupo: str | None = None
    created_at: datetime
    updated_at: datetime


class CplListResponse(Schema):
    """CPLs of the selected organization, newest first."""

    cpls: list[CplResponse]
    notice: str | None = Field(
        default=None,
        description="Set when the list could not be re-read after a change",
    )


class TargetGroupResponse(Schema):
    """A provisioned group that can receive CPLs."""

    id: UUID
    nombre: str
    id_grupo: str


class TargetGroupListResponse(Schema):
    """Recipient choices, ordered by name."""

    grupos: list[TargetGroupResponse]
