"""
Group provisioning workflow.

Creating a group is three independent fallible steps, never one atomic unit:

    1. insert the row as "Creando..." with no id_grupo
    2. call the provisioning webhook (best-effort, never raises)
    3. on a JID, update the row to "Creado" with id_grupo = JID

A deferred refresh is scheduled whatever step 2 and 3 did. Failures of steps
2 and 3 are logged and leave the row pending; they are never surfaced.
"""

from collections.abc import Sequence
from typing import Any

from apps.accounts.models import User
from apps.core.exceptions import InputValidationError, PersistenceError, RecordNotFoundError
from apps.core.gateway import PersistenceGateway
from apps.core.logging import get_logger
from apps.grupos.models import Grupo
from apps.grupos.provisioning import ProvisioningClient
from apps.grupos.refresh import GroupListener, GroupRefreshScheduler, get_refresh_scheduler, log_pending_groups
from apps.organizations.models import Organization

logger = get_logger(__name__)


def validate_group_input(nombre: str, numeros_whatsapp: Sequence[str]) -> str:
    """
    Check a new group's fields and return the trimmed name.

    Raises:
        InputValidationError: Blank name or no non-blank phone number
    """
    nombre = (nombre or "").strip()
    if not nombre:
        raise InputValidationError("El nombre del grupo es obligatorio")
    if not any((n or "").strip() for n in numeros_whatsapp):
        raise InputValidationError("Debe indicar al menos un número de WhatsApp")
    return nombre


def apply_provisioning_result(
    group_id: Any,
    jid: str,
    gateway: PersistenceGateway | None = None,
    organization_id: Any = None,
) -> Grupo | None:
    """
    Move a pending group to "Creado" with its external identifier.

    Only "Creando..." groups transition; any other estado is left alone.

    Returns:
        The group (updated or untouched), None if it does not exist
    """
    gateway = gateway or PersistenceGateway()
    filters = {"organization_id": organization_id} if organization_id is not None else None

    group = gateway.get("grupos", group_id, filters)
    if group is None:
        return None
    if not group.is_pending:
        logger.info("group_provisioning_ignored", group_id=str(group_id), estado=group.estado)
        return group

    group = gateway.update(
        "grupos",
        group.id,
        {"id_grupo": jid, "estado": Grupo.Estado.CREADO},
    )
    logger.info("group_provisioned", group_id=str(group.id), id_grupo=jid)
    return group


class GroupProvisioningWorkflow:
    """Group operations for one organization."""

    def __init__(
        self,
        organization: Organization,
        gateway: PersistenceGateway | None = None,
        provisioner: ProvisioningClient | None = None,
        scheduler: GroupRefreshScheduler | None = None,
    ):
        self.organization = organization
        self.gateway = gateway or PersistenceGateway()
        self.provisioner = provisioner or ProvisioningClient()
        self.scheduler = scheduler or get_refresh_scheduler()

    @property
    def _scope(self) -> dict[str, Any]:
        return {"organization_id": self.organization.id}

    def list_groups(self) -> list[Grupo]:
        """Groups of the organization, newest first."""
        return self.gateway.select("grupos", self._scope, order=["-created_at"])

    def create_group(
        self,
        nombre: str,
        numeros_whatsapp: Sequence[str],
        creator: User,
        listener: GroupListener | None = None,
    ) -> Grupo:
        """
        Create a group and request its provisioning.

        Raises:
            InputValidationError: Before any persistence call
            PersistenceError: If the initial insert fails
        """
        nombre = validate_group_input(nombre, numeros_whatsapp)

        group = self.gateway.insert(
            "grupos",
            {
                "nombre": nombre,
                "estado": Grupo.Estado.CREANDO,
                "id_grupo": None,
                "numeros_whatsapp": list(numeros_whatsapp),
                "organization_id": self.organization.id,
                "user_id": creator.id,
            },
        )
        logger.info(
            "group_created",
            group_id=str(group.id),
            organization_id=str(self.organization.id),
            numbers=len(group.numeros_whatsapp),
        )

        result = self.provisioner.provision(creator.id, group.id, group.numeros_whatsapp)
        if result.success:
            try:
                updated = apply_provisioning_result(group.id, result.jid, self.gateway)
            except (PersistenceError, RecordNotFoundError) as e:
                logger.warning("group_provisioning_update_failed", group_id=str(group.id), error=str(e))
            else:
                if updated is None:
                    logger.warning("group_provisioning_target_missing", group_id=str(group.id))
                else:
                    group = updated
        else:
            logger.warning(
                "group_provisioning_pending",
                group_id=str(group.id),
                error_type=result.error_type,
                error_message=result.error_message,
                http_status=result.http_status,
                duration_ms=result.duration_ms,
            )

        self.scheduler.schedule(
            self.organization.id,
            listener or log_pending_groups(self.organization.id),
        )

        return group

    def update_group(self, group_id: Any, nombre: str) -> Grupo:
        """
        Rename a group. Nothing else is editable.

        Raises:
            InputValidationError: Blank name
            RecordNotFoundError: Group not in this organization
        """
        nombre = (nombre or "").strip()
        if not nombre:
            raise InputValidationError("El nombre del grupo es obligatorio")
        return self.gateway.update("grupos", group_id, {"nombre": nombre}, self._scope)

    def delete_group(self, group_id: Any) -> None:
        """
        Delete a group and clear CPL recipients that pointed at it.

        Raises:
            RecordNotFoundError: Group not in this organization
        """
        group = self.gateway.get("grupos", group_id, self._scope)
        if group is None:
            raise RecordNotFoundError(f"grupos row {group_id} not found")

        if group.id_grupo:
            orphaned = self.gateway.select(
                "cpls",
                {**self._scope, "destinatario_persona_grupo": group.id_grupo},
            )
            for cpl in orphaned:
                self.gateway.update("cpls", cpl.id, {"destinatario_persona_grupo": None})
            if orphaned:
                logger.info("cpl_recipients_cleared", id_grupo=group.id_grupo, count=len(orphaned))

        self.gateway.delete("grupos", group.id, self._scope)
        logger.info("group_deleted", group_id=str(group.id), organization_id=str(self.organization.id))
