"""
Persistence gateway - the table contract every service writes through.

Tables are addressed by their db_table name (organizations, user_roles,
profiles, grupos, cpls, contact_requests) and rows come back as model
instances. Each call is an independent, fallible remote operation: nothing
here spans a transaction across calls, and any database failure is raised
as PersistenceError.

Usage:
    gateway = PersistenceGateway()
    grupo = gateway.insert("grupos", {"nombre": "Ventas", ...})
    gateway.update("grupos", grupo.id, {"estado": "Creado"})
"""

from collections.abc import Mapping, Sequence
from typing import Any, TypedDict

from django.apps import apps
from django.db import DatabaseError, models

from apps.core.exceptions import PersistenceError, RecordNotFoundError
from apps.core.logging import get_logger

logger = get_logger(__name__)

SUPER_ADMIN_ROLE = "super_admin"
ACTIVE_STATUS = "active"


class OrganizationMembership(TypedDict):
    """Row shape returned by the organization lookups."""

    organization_id: str
    organization_name: str
    user_role: str


def get_table_model(table: str) -> type[models.Model]:
    """Resolve a table name to its Django model."""
    for model in apps.get_models():
        if model._meta.db_table == table:
            return model
    raise ValueError(f"Unknown table: {table}")


class PersistenceGateway:
    """Thin select/insert/update/delete contract plus the two access lookups."""

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order: Sequence[str] | None = None,
    ) -> list[Any]:
        """
        Return rows matching all filters.

        Args:
            table: Table name
            filters: Django lookups, e.g. {"organization_id": org.id}
            order: Field names, "-" prefix for descending
        """
        model = get_table_model(table)
        try:
            queryset = model.objects.filter(**dict(filters or {}))
            if order:
                queryset = queryset.order_by(*order)
            return list(queryset)
        except DatabaseError as e:
            raise self._failure("select", table, e) from e

    def get(self, table: str, row_id: Any, filters: Mapping[str, Any] | None = None) -> Any | None:
        """Return a single row by id (within filters), or None."""
        return self.get_first(table, {**dict(filters or {}), "id": row_id})

    def get_first(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order: Sequence[str] | None = None,
    ) -> Any | None:
        """Return the first row matching filters, or None."""
        rows = self.select(table, filters, order)
        return rows[0] if rows else None

    def insert(self, table: str, row: Mapping[str, Any]) -> Any:
        """Insert a row and return it with generated fields populated."""
        model = get_table_model(table)
        try:
            return model.objects.create(**dict(row))
        except DatabaseError as e:
            raise self._failure("insert", table, e) from e

    def update(
        self,
        table: str,
        row_id: Any,
        patch: Mapping[str, Any],
        filters: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Apply a patch to one row and return the updated row.

        Raises:
            RecordNotFoundError: If no row matches id and filters
        """
        instance = self.get(table, row_id, filters)
        if instance is None:
            raise RecordNotFoundError(f"{table} row {row_id} not found")

        for field_name, value in patch.items():
            setattr(instance, field_name, value)

        update_fields = list(patch)
        if any(f.name == "updated_at" for f in instance._meta.concrete_fields):
            update_fields.append("updated_at")

        try:
            instance.save(update_fields=update_fields)
        except DatabaseError as e:
            raise self._failure("update", table, e) from e
        return instance

    def delete(self, table: str, row_id: Any, filters: Mapping[str, Any] | None = None) -> None:
        """
        Hard delete one row.

        Raises:
            RecordNotFoundError: If no row matches id and filters
        """
        model = get_table_model(table)
        try:
            deleted, _ = model.objects.filter(**dict(filters or {}), id=row_id).delete()
        except DatabaseError as e:
            raise self._failure("delete", table, e) from e
        if not deleted:
            raise RecordNotFoundError(f"{table} row {row_id} not found")

    # --- Remote procedures ---

    def is_super_admin(self, user_id: Any) -> bool:
        """
        Global super-admin check.

        Only a super_admin row without organization grants it; organization-scoped
        rows never do.
        """
        user_role_model = apps.get_model("accounts", "UserRole")
        try:
            return user_role_model.objects.filter(
                user_id=user_id,
                role=SUPER_ADMIN_ROLE,
                organization__isnull=True,
            ).exists()
        except DatabaseError as e:
            raise self._failure("is_super_admin", "user_roles", e) from e

    def get_user_organizations(self, user_id: Any) -> list[OrganizationMembership]:
        """
        Active organizations the identity belongs to, earliest membership first.

        Ties on created_at are broken by membership id so the order is stable.
        """
        user_role_model = apps.get_model("accounts", "UserRole")
        try:
            memberships = list(
                user_role_model.objects.filter(
                    user_id=user_id,
                    organization__isnull=False,
                    organization__status=ACTIVE_STATUS,
                )
                .select_related("organization")
                .order_by("created_at", "id")
            )
        except DatabaseError as e:
            raise self._failure("get_user_organizations", "user_roles", e) from e

        return [
            OrganizationMembership(
                organization_id=str(m.organization_id),
                organization_name=m.organization.name,
                user_role=m.role,
            )
            for m in memberships
        ]

    def list_active_organizations(self) -> list[OrganizationMembership]:
        """Every active organization, annotated with the super_admin role."""
        organizations = self.select("organizations", {"status": ACTIVE_STATUS}, order=["name"])
        return [
            OrganizationMembership(
                organization_id=str(org.id),
                organization_name=org.name,
                user_role=SUPER_ADMIN_ROLE,
            )
            for org in organizations
        ]

    def _failure(self, operation: str, table: str, error: DatabaseError) -> PersistenceError:
        logger.warning(
            "persistence_error",
            operation=operation,
            table=table,
            error=str(error),
        )
        return PersistenceError(f"Could not {operation.replace('_', ' ')} {table}")
