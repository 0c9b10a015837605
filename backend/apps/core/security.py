"""
Core security - authentication classes and auth context lookup for the API.
"""

from django.http import HttpRequest
from ninja.errors import HttpError
from ninja.security import HttpBearer

from apps.core.auth import AuthContext

# Header carrying the organization a request acts within
ORGANIZATION_HEADER = "X-Organization-Id"


class BearerAuth(HttpBearer):
    """
    Bearer token authentication for API endpoints.

    JWT validation is performed by SessionAuthMiddleware; this class rejects
    requests the middleware did not authenticate and documents the OpenAPI
    security scheme.
    """

    def authenticate(self, request, token: str) -> str | None:
        """
        Accept the request if the middleware resolved a user for the token.

        Returns the token, or None (triggers 401).
        """
        if not token or getattr(request, "auth_user", None) is None:
            return None
        return token


def get_auth_context(request: HttpRequest) -> AuthContext:
    """
    Resolve the AuthContext for a request.

    Access is resolved at call time so an organization switch (a different
    X-Organization-Id header) is honored immediately. Tests may attach a
    ready AuthContext as request.auth.

    Raises:
        HttpError 401: If the middleware did not authenticate a user
        HttpError 403: If the requested organization is not accessible
    """
    existing = getattr(request, "auth", None)
    if isinstance(existing, AuthContext):
        return existing

    user = getattr(request, "auth_user", None)
    if user is None:
        raise HttpError(401, "Not authenticated")

    from apps.accounts.services import build_auth_context

    return build_auth_context(
        user,
        requested_organization_id=request.headers.get(ORGANIZATION_HEADER) or None,
    )
