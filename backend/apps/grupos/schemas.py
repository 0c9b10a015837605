"""
Grupos API schemas.
"""

from datetime import datetime
from uuid import UUID

from ninja import Schema
from pydantic import Field


class GroupCreate(Schema):
    """Request to create a group."""

    nombre: str = Field(..., max_length=255, examples=["Clientes VIP"])
    numeros_whatsapp: list[str] = Field(
        ...,
        description="Phone numbers with country code, stored as given",
        examples=[["+5215512345678", "+5215587654321"]],
    )


class GroupUpdate(Schema):
    """Rename a group."""

    nombre: str = Field(..., max_length=255)


class GroupResponse(Schema):
    """Group record."""

    id: UUID
    nombre: str
    id_grupo: str | None = None
    estado: str
    numeros_whatsapp: list[str]
    created_at: datetime
    updated_at: datetime


class GroupListResponse(Schema):
    """Groups of the selected organization, newest first."""

    grupos: list[GroupResponse]


class GroupCreatedResponse(Schema):
    """Created group plus when its state is worth re-reading."""

    grupo: GroupResponse
    refresh_after_seconds: float = Field(
        ...,
        description="Delay after which a pending group may have been provisioned",
    )
