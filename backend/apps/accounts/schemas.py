"""
Accounts API schemas - Pydantic models for request/response.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from apps.accounts.constants import Role

# --- Request Schemas ---


class LoginRequest(BaseModel):
    """Email and password sign-in."""

    email: EmailStr = Field(..., examples=["ana@empresa.com"])
    password: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    """Editable profile fields. Omitted fields are left unchanged."""

    nombre: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    default_organization_id: UUID | None = Field(
        default=None,
        description="Organization selected when a request names none",
    )


class CreateUserRequest(BaseModel):
    """Add a user to the selected organization."""

    email: EmailStr = Field(..., examples=["nuevo@empresa.com"])
    role: Role = Field(default=Role.USER, description="admin or user")


# --- Response Schemas ---


class SessionResponse(BaseModel):
    """Issued session: identity plus bearer credential."""

    user_id: str = Field(..., description="Authenticated user id")
    email: str
    credential: str = Field(..., description="JWT for the Authorization header (Bearer <credential>)")
    expires_at: int = Field(..., description="Unix timestamp of session expiry")


class OrganizationAccessInfo(BaseModel):
    """An organization the user may act within."""

    organization_id: str
    organization_name: str
    user_role: str


class UserInfo(BaseModel):
    """Current user identity."""

    id: str
    email: str


class MeResponse(BaseModel):
    """Resolved access for the current session."""

    user: UserInfo
    role: str = Field(..., description="Effective role: super_admin, admin or user")
    organizations: list[OrganizationAccessInfo]
    selected_organization: OrganizationAccessInfo | None = Field(
        default=None,
        description="Organization requests act within; null when the user has none",
    )
    notice: str | None = Field(default=None, description="Non-fatal access lookup problem")

    model_config = {
        "json_schema_extra": {
            "example": {
                "user": {"id": "6f0c...", "email": "ana@empresa.com"},
                "role": "admin",
                "organizations": [
                    {"organization_id": "0b1e...", "organization_name": "Acme", "user_role": "admin"}
                ],
                "selected_organization": {
                    "organization_id": "0b1e...",
                    "organization_name": "Acme",
                    "user_role": "admin",
                },
                "notice": None,
            }
        }
    }


class ProfileResponse(BaseModel):
    """User profile."""

    id: UUID
    nombre: str | None
    phone: str | None
    vinculado: bool
    default_organization_id: UUID | None
    created_at: datetime
    updated_at: datetime


class OrganizationUserResponse(BaseModel):
    """A membership of the selected organization."""

    id: UUID
    user_id: UUID
    email: str
    role: str
    nombre: str | None = None
    vinculado: bool = False
    created_at: datetime


class OrganizationUserListResponse(BaseModel):
    """Memberships of the selected organization, newest first."""

    users: list[OrganizationUserResponse]


class CreatedUserResponse(OrganizationUserResponse):
    """Created membership. The temporary password is only returned here."""

    temporary_password: str | None = Field(
        default=None,
        description="One-time password for a newly created identity",
    )
