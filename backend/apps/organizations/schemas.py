"""
Organization API schemas.
"""

from datetime import datetime
from uuid import UUID

from ninja import Schema
from pydantic import Field, field_validator


class OrganizationCreate(Schema):
    """Request to create an organization."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Acme Ventas"])
    whatsapp_api_key: str | None = Field(default=None, max_length=255)
    whatsapp_phone_number: str | None = Field(default=None, max_length=32)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Reject names that are only whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Organization name is required")
        return v


class OrganizationResponse(Schema):
    """Organization record."""

    id: UUID
    name: str
    status: str
    whatsapp_phone_number: str | None = None
    created_at: datetime
    updated_at: datetime


class OrganizationListResponse(Schema):
    """All organizations, newest first."""

    organizations: list[OrganizationResponse]
