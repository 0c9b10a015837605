"""
Contact API schemas.
"""

from datetime import datetime
from uuid import UUID

from ninja import Schema
from pydantic import EmailStr, Field, field_validator


class ContactRequestCreate(Schema):
    """Public contact form submission."""

    nombre: str = Field(..., max_length=255)
    correo: EmailStr
    whatsapp: str = Field(..., max_length=32, examples=["+5215512345678"])
    mensaje: str = Field(..., max_length=5000)

    @field_validator("nombre", "whatsapp", "mensaje")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("This field is required")
        return v


class ContactRequestResponse(Schema):
    """Stored contact request."""

    id: UUID
    estado: str
    created_at: datetime
