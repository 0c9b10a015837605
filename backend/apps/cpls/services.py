"""
CPL scoping, listing and writes.

Every read and write is scoped to one organization. Writes check their input
before touching storage or the database, upload new media first, and null
the columns of every content type that is not selected.
"""

from dataclasses import dataclass
from typing import Any

from apps.accounts.models import User
from apps.core.exceptions import InputValidationError, RecordNotFoundError
from apps.core.gateway import PersistenceGateway
from apps.core.logging import get_logger
from apps.cpls.constants import CONTENT_FIELDS, TipoCpl
from apps.cpls.models import Cpl
from apps.cpls.schemas import CplInput
from apps.grupos.models import Grupo
from apps.media.services import AUDIOS_BUCKET, IMAGES_BUCKET, StorageService, generate_path, get_storage_service
from apps.organizations.models import Organization

logger = get_logger(__name__)

VALID_TYPES = tuple(TipoCpl.values)


@dataclass
class MediaUpload:
    """A file attached to a CPL form."""

    filename: str
    content: bytes
    content_type: str


def normalize_types(tipo_cpl: list[str]) -> list[str]:
    """
    Validate a type selection and return it deduplicated in canonical order.

    Raises:
        InputValidationError: Empty selection or an unknown type
    """
    if not tipo_cpl:
        raise InputValidationError("Selecciona al menos un tipo de CPL")
    unknown = sorted(set(tipo_cpl) - set(VALID_TYPES))
    if unknown:
        raise InputValidationError(f"Tipo de CPL no válido: {', '.join(unknown)}")
    return [t for t in VALID_TYPES if t in tipo_cpl]


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CplService:
    """CPL operations for one organization."""

    def __init__(
        self,
        organization: Organization,
        gateway: PersistenceGateway | None = None,
        storage: StorageService | None = None,
    ):
        self.organization = organization
        self.gateway = gateway or PersistenceGateway()
        self._storage = storage

    @property
    def storage(self) -> StorageService:
        if self._storage is None:
            self._storage = get_storage_service()
        return self._storage

    @property
    def _scope(self) -> dict[str, Any]:
        return {"organization_id": self.organization.id}

    def list_cpls(self) -> list[Cpl]:
        """CPLs of the organization, newest first."""
        return self.gateway.select("cpls", self._scope, order=["-created_at"])

    def list_target_groups(self) -> list[Grupo]:
        """Provisioned groups of the organization, by name."""
        return self.gateway.select(
            "grupos",
            {**self._scope, "estado": Grupo.Estado.CREADO, "id_grupo__isnull": False},
            order=["nombre"],
        )

    def upsert_cpl(
        self,
        data: CplInput,
        creator: User,
        editing_id: Any = None,
        imagen: MediaUpload | None = None,
        audio: MediaUpload | None = None,
    ) -> Cpl:
        """
        Create a CPL, or replace the fields of an existing one.

        On edit, a stored image or audio URL survives only while its type is
        still selected and no new file replaces it.

        Raises:
            InputValidationError: Bad type selection or date range, before any I/O
            InputValidationError: Recipient is not a provisioned group of this organization
            RecordNotFoundError: editing_id not in this organization
            UploadError: A media upload failed; nothing was written
            PersistenceError: The row write failed
        """
        tipos = normalize_types(data.tipo_cpl)
        if data.fecha_termino < data.fecha_inicio:
            raise InputValidationError("La fecha de término no puede ser anterior a la fecha de inicio")

        existing = None
        if editing_id is not None:
            existing = self.gateway.get("cpls", editing_id, self._scope)
            if existing is None:
                raise RecordNotFoundError(f"cpls row {editing_id} not found")

        destinatario = _blank_to_none(data.destinatario_persona_grupo)
        if destinatario is not None and not self._is_target_group(destinatario):
            raise InputValidationError("El grupo destinatario no pertenece a la organización")

        values: dict[str, Any] = {
            "mensaje_x_dia": _blank_to_none(data.mensaje_x_dia),
            "youtube_url": _blank_to_none(data.youtube_url),
            "texto_video": _blank_to_none(data.texto_video),
            "imagen_texto": _blank_to_none(data.imagen_texto),
            "audio_texto": _blank_to_none(data.audio_texto),
            "imagen_url": existing.imagen_url if existing else None,
            "audio_url": existing.audio_url if existing else None,
        }

        if imagen is not None and TipoCpl.IMAGEN in tipos:
            values["imagen_url"] = self._upload(IMAGES_BUCKET, imagen, creator)
        if audio is not None and TipoCpl.AUDIO in tipos:
            values["audio_url"] = self._upload(AUDIOS_BUCKET, audio, creator)

        row: dict[str, Any] = {
            "fecha_inicio": data.fecha_inicio,
            "fecha_termino": data.fecha_termino,
            "dia_semana": data.dia_semana,
            "hora": data.hora,
            "tipo_cpl": tipos,
            "destinatario_persona_grupo": destinatario,
        }
        for tipo, fields in CONTENT_FIELDS.items():
            for field_name in fields:
                row[field_name] = values[field_name] if tipo in tipos else None

        if existing is not None:
            cpl = self.gateway.update("cpls", existing.id, row, self._scope)
            logger.info("cpl_updated", cpl_id=str(cpl.id), tipo_cpl=tipos)
            return cpl

        cpl = self.gateway.insert(
            "cpls",
            {**row, "organization_id": self.organization.id, "user_id": creator.id},
        )
        logger.info(
            "cpl_created",
            cpl_id=str(cpl.id),
            organization_id=str(self.organization.id),
            tipo_cpl=tipos,
        )
        return cpl

    def delete_cpl(self, cpl_id: Any) -> None:
        """
        Delete a CPL of the organization.

        Raises:
            RecordNotFoundError: CPL not in this organization
        """
        self.gateway.delete("cpls", cpl_id, self._scope)
        logger.info("cpl_deleted", cpl_id=str(cpl_id), organization_id=str(self.organization.id))

    def _is_target_group(self, id_grupo: str) -> bool:
        group = self.gateway.get_first(
            "grupos",
            {**self._scope, "id_grupo": id_grupo, "estado": Grupo.Estado.CREADO},
        )
        return group is not None

    def _upload(self, bucket: str, upload: MediaUpload, creator: User) -> str:
        path = generate_path(str(creator.id), upload.filename)
        return self.storage.upload(bucket, path, upload.content, upload.content_type)
