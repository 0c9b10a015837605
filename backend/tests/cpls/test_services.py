"""
Tests for CPL scoping and writes.
"""

from datetime import date, time, timedelta
from unittest.mock import MagicMock, patch

import pytest

from apps.core.exceptions import InputValidationError, RecordNotFoundError, UploadError
from apps.core.gateway import PersistenceGateway
from apps.cpls.models import Cpl
from apps.cpls.schemas import CplInput
from apps.cpls.services import CplService, MediaUpload, normalize_types
from apps.media.services import StorageService
from tests.accounts.factories import OrganizationFactory, UserFactory
from tests.cpls.factories import CplFactory
from tests.grupos.factories import GrupoFactory, ProvisionedGrupoFactory

IMAGE_URL = "http://testserver/media/images/u/1-a.png"
AUDIO_URL = "http://testserver/media/audios/u/1-b.mp3"


def make_input(**overrides) -> CplInput:
    fields = {
        "fecha_inicio": date(2026, 2, 2),
        "fecha_termino": date(2026, 4, 27),
        "dia_semana": "Lunes",
        "hora": time(10, 0),
        "tipo_cpl": ["texto"],
        "mensaje_x_dia": "Hola",
    }
    fields.update(overrides)
    return CplInput(**fields)


def png() -> MediaUpload:
    return MediaUpload(filename="foto.png", content=b"\x89PNG", content_type="image/png")


def mp3() -> MediaUpload:
    return MediaUpload(filename="nota.mp3", content=b"ID3", content_type="audio/mpeg")


@pytest.fixture
def storage() -> MagicMock:
    mock = MagicMock(spec=StorageService)
    mock.upload.side_effect = lambda bucket, path, content, content_type: (
        IMAGE_URL if bucket == "images" else AUDIO_URL
    )
    return mock


class TestNormalizeTypes:
    """Tests for normalize_types."""

    def test_canonical_order_and_dedup(self) -> None:
        assert normalize_types(["audio", "texto", "audio", "imagen"]) == ["texto", "imagen", "audio"]

    def test_empty_rejected(self) -> None:
        with pytest.raises(InputValidationError):
            normalize_types([])

    def test_unknown_rejected(self) -> None:
        with pytest.raises(InputValidationError, match="gif"):
            normalize_types(["texto", "gif"])


@pytest.mark.django_db
class TestUpsertCreate:
    """Tests for creating CPLs."""

    def test_creates_scoped_row(self, storage: MagicMock) -> None:
        org = OrganizationFactory.create()
        user = UserFactory.create()

        cpl = CplService(org, storage=storage).upsert_cpl(make_input(), creator=user)

        assert cpl.organization_id == org.id
        assert cpl.user_id == user.id
        assert cpl.tipo_cpl == ["texto"]
        assert cpl.mensaje_x_dia == "Hola"
        storage.upload.assert_not_called()

    def test_nulls_fields_of_unselected_types(self, storage: MagicMock) -> None:
        org = OrganizationFactory.create()

        cpl = CplService(org, storage=storage).upsert_cpl(
            make_input(
                tipo_cpl=["video"],
                mensaje_x_dia="ignorado",
                youtube_url="https://youtu.be/abc",
                texto_video="Mira",
                imagen_texto="ignorado",
            ),
            creator=UserFactory.create(),
        )

        assert cpl.youtube_url == "https://youtu.be/abc"
        assert cpl.texto_video == "Mira"
        assert cpl.mensaje_x_dia is None
        assert cpl.imagen_texto is None
        assert cpl.imagen_url is None
        assert cpl.audio_url is None

    def test_uploads_selected_media(self, storage: MagicMock) -> None:
        org = OrganizationFactory.create()
        user = UserFactory.create()

        cpl = CplService(org, storage=storage).upsert_cpl(
            make_input(tipo_cpl=["imagen", "audio"], imagen_texto="Foto"),
            creator=user,
            imagen=png(),
            audio=mp3(),
        )

        assert cpl.imagen_url == IMAGE_URL
        assert cpl.audio_url == AUDIO_URL
        assert cpl.tipo_cpl == ["imagen", "audio"]
        buckets = [c.args[0] for c in storage.upload.call_args_list]
        assert buckets == ["images", "audios"]
        path = storage.upload.call_args_list[0].args[1]
        assert path.startswith(f"{user.id}/")
        assert path.endswith(".png")

    def test_file_for_unselected_type_not_uploaded(self, storage: MagicMock) -> None:
        cpl = CplService(OrganizationFactory.create(), storage=storage).upsert_cpl(
            make_input(tipo_cpl=["texto"]),
            creator=UserFactory.create(),
            imagen=png(),
        )

        storage.upload.assert_not_called()
        assert cpl.imagen_url is None

    def test_upload_failure_writes_nothing(self, storage: MagicMock) -> None:
        storage.upload.side_effect = UploadError("bucket unavailable")

        with pytest.raises(UploadError):
            CplService(OrganizationFactory.create(), storage=storage).upsert_cpl(
                make_input(tipo_cpl=["imagen"]),
                creator=UserFactory.create(),
                imagen=png(),
            )

        assert not Cpl.objects.exists()

    def test_blank_text_stored_as_none(self, storage: MagicMock) -> None:
        cpl = CplService(OrganizationFactory.create(), storage=storage).upsert_cpl(
            make_input(mensaje_x_dia="   ", destinatario_persona_grupo=""),
            creator=UserFactory.create(),
        )

        assert cpl.mensaje_x_dia is None
        assert cpl.destinatario_persona_grupo is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"tipo_cpl": []},
            {"tipo_cpl": ["texto", "pdf"]},
            {"fecha_inicio": date(2026, 5, 1), "fecha_termino": date(2026, 4, 1)},
        ],
    )
    def test_invalid_input_touches_nothing(self, storage: MagicMock, overrides: dict) -> None:
        gateway = MagicMock(spec=PersistenceGateway)

        with pytest.raises(InputValidationError):
            CplService(OrganizationFactory.create(), gateway=gateway, storage=storage).upsert_cpl(
                make_input(**{"tipo_cpl": ["imagen"], **overrides}),
                creator=UserFactory.create(),
                imagen=png(),
            )

        assert gateway.method_calls == []
        storage.upload.assert_not_called()

    def test_recipient_must_be_provisioned_group_of_organization(self, storage: MagicMock) -> None:
        org = OrganizationFactory.create()
        own = ProvisionedGrupoFactory.create(organization=org)
        pending = GrupoFactory.create(organization=org, id_grupo="pendiente@g.us")
        foreign = ProvisionedGrupoFactory.create()
        service = CplService(org, storage=storage)

        cpl = service.upsert_cpl(make_input(destinatario_persona_grupo=own.id_grupo), creator=UserFactory.create())
        assert cpl.destinatario_persona_grupo == own.id_grupo

        for id_grupo in (foreign.id_grupo, pending.id_grupo, "desconocido@g.us"):
            with pytest.raises(InputValidationError):
                service.upsert_cpl(make_input(destinatario_persona_grupo=id_grupo), creator=UserFactory.create())

        assert Cpl.objects.count() == 1

    def test_foreign_recipient_rejected_before_upload(self, storage: MagicMock) -> None:
        foreign = ProvisionedGrupoFactory.create()

        with pytest.raises(InputValidationError):
            CplService(OrganizationFactory.create(), storage=storage).upsert_cpl(
                make_input(tipo_cpl=["imagen"], destinatario_persona_grupo=foreign.id_grupo),
                creator=UserFactory.create(),
                imagen=png(),
            )

        storage.upload.assert_not_called()

    def test_same_day_range_allowed(self, storage: MagicMock) -> None:
        cpl = CplService(OrganizationFactory.create(), storage=storage).upsert_cpl(
            make_input(fecha_inicio=date(2026, 3, 3), fecha_termino=date(2026, 3, 3)),
            creator=UserFactory.create(),
        )

        assert cpl.fecha_inicio == cpl.fecha_termino


@pytest.mark.django_db
class TestUpsertEdit:
    """Tests for editing CPLs."""

    def test_keeps_stored_image_without_new_file(self, storage: MagicMock) -> None:
        existing = CplFactory.create(tipo_cpl=["imagen"], mensaje_x_dia=None, imagen_url=IMAGE_URL)

        cpl = CplService(existing.organization, storage=storage).upsert_cpl(
            make_input(tipo_cpl=["imagen"], imagen_texto="Nuevo pie"),
            creator=existing.user,
            editing_id=existing.id,
        )

        assert cpl.id == existing.id
        assert cpl.imagen_url == IMAGE_URL
        assert cpl.imagen_texto == "Nuevo pie"
        storage.upload.assert_not_called()

    def test_deselecting_type_clears_its_url(self, storage: MagicMock) -> None:
        existing = CplFactory.create(tipo_cpl=["texto", "imagen"], imagen_url=IMAGE_URL)

        cpl = CplService(existing.organization, storage=storage).upsert_cpl(
            make_input(tipo_cpl=["texto"]),
            creator=existing.user,
            editing_id=existing.id,
        )

        cpl.refresh_from_db()
        assert cpl.imagen_url is None
        assert cpl.tipo_cpl == ["texto"]

    def test_new_file_replaces_url(self, storage: MagicMock) -> None:
        existing = CplFactory.create(tipo_cpl=["audio"], audio_url="http://old/a.mp3")

        cpl = CplService(existing.organization, storage=storage).upsert_cpl(
            make_input(tipo_cpl=["audio"]),
            creator=existing.user,
            editing_id=existing.id,
            audio=mp3(),
        )

        assert cpl.audio_url == AUDIO_URL

    def test_cpl_of_other_organization_not_found(self, storage: MagicMock) -> None:
        foreign = CplFactory.create()

        with pytest.raises(RecordNotFoundError):
            CplService(OrganizationFactory.create(), storage=storage).upsert_cpl(
                make_input(),
                creator=UserFactory.create(),
                editing_id=foreign.id,
            )

        foreign.refresh_from_db()
        assert foreign.mensaje_x_dia == "Buenos días"


@pytest.mark.django_db
class TestListAndDelete:
    """Tests for listing, target groups and deletion."""

    def test_list_scoped_newest_first(self) -> None:
        org = OrganizationFactory.create()
        older = CplFactory.create(organization=org)
        newer = CplFactory.create(organization=org)
        Cpl.objects.filter(id=older.id).update(created_at=newer.created_at - timedelta(minutes=5))
        CplFactory.create()

        result = CplService(org).list_cpls()

        assert [c.id for c in result] == [newer.id, older.id]

    def test_list_visible_to_every_member(self) -> None:
        org = OrganizationFactory.create()
        CplFactory.create(organization=org, user=UserFactory.create())
        CplFactory.create(organization=org, user=UserFactory.create())

        assert len(CplService(org).list_cpls()) == 2

    def test_target_groups_only_provisioned(self) -> None:
        org = OrganizationFactory.create()
        ProvisionedGrupoFactory.create(organization=org, nombre="Zeta")
        ProvisionedGrupoFactory.create(organization=org, nombre="Alfa")
        GrupoFactory.create(organization=org, nombre="Pendiente")
        ProvisionedGrupoFactory.create(nombre="Ajeno")

        result = CplService(org).list_target_groups()

        assert [g.nombre for g in result] == ["Alfa", "Zeta"]

    def test_delete_scoped(self) -> None:
        org = OrganizationFactory.create()
        own = CplFactory.create(organization=org)
        foreign = CplFactory.create()
        service = CplService(org)

        service.delete_cpl(own.id)
        with pytest.raises(RecordNotFoundError):
            service.delete_cpl(foreign.id)

        assert not Cpl.objects.filter(id=own.id).exists()
        assert Cpl.objects.filter(id=foreign.id).exists()

    def test_storage_resolved_lazily(self) -> None:
        with patch("apps.cpls.services.get_storage_service") as mock_get:
            service = CplService(OrganizationFactory.create())
            mock_get.assert_not_called()
            assert service.storage is mock_get.return_value
