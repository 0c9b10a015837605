"""
Custom type definitions for the application.

These types help mypy understand custom attributes added by middleware.
"""

from typing import TYPE_CHECKING

from django.http import HttpRequest

if TYPE_CHECKING:
    from apps.accounts.models import User


class AuthenticatedHttpRequest(HttpRequest):
    """
    HttpRequest with authentication attributes added by SessionAuthMiddleware.

    Use this type for endpoints that require authentication.
    The middleware populates these attributes from session JWT validation.
    """

    auth_user: "User | None"
    auth_session_id: str | None
    auth_failed: bool
