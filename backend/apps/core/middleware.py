"""
Core middleware: request logging context and session authentication.
"""

import time
from collections.abc import Callable
from uuid import uuid4

from django.http import HttpRequest, HttpResponse

from apps.core.logging import bind_contextvars, clear_contextvars, get_logger

logger = get_logger(__name__)

# Paths that never carry a session (login, public intake, inbound callbacks)
PUBLIC_PATH_PREFIXES = (
    "/admin/",
    "/webhooks/",
    "/api/v1/health",
    "/api/v1/auth/login",
    "/api/v1/contact",
)


class RequestContextMiddleware:
    """
    Binds per-request structlog context and logs request completion.

    The trace id comes from X-Request-ID when the caller provides one and is
    echoed back on the response.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        clear_contextvars()
        trace_id = request.headers.get("X-Request-ID") or str(uuid4())
        bind_contextvars(
            correlation_id=trace_id,
            **{"http.method": request.method, "http.url_details.path": request.path},
        )

        start = time.monotonic()
        try:
            response = self.get_response(request)
            logger.info(
                "request_finished",
                duration_ms=(time.monotonic() - start) * 1000,
                **{"http.status_code": response.status_code},
            )
            response["X-Request-ID"] = trace_id
            return response
        finally:
            clear_contextvars()


class SessionAuthMiddleware:
    """
    Validates the session JWT from the Authorization header.

    Sets request.auth_user, request.auth_session_id and request.auth_failed.
    Endpoints reject unauthenticated requests through BearerAuth and
    get_auth_context; this middleware never short-circuits a request.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request.auth_user = None  # type: ignore[attr-defined]
        request.auth_session_id = None  # type: ignore[attr-defined]
        request.auth_failed = False  # type: ignore[attr-defined]

        if not self._is_public(request.path):
            auth_header = request.headers.get("Authorization", "")
            if auth_header.startswith("Bearer "):
                self._authenticate_jwt(request, auth_header.removeprefix("Bearer ").strip())

        return self.get_response(request)

    def _is_public(self, path: str) -> bool:
        return path.startswith(PUBLIC_PATH_PREFIXES)

    def _authenticate_jwt(self, request: HttpRequest, token: str) -> None:
        from apps.accounts.models import User
        from apps.accounts.sessions import InvalidSessionError, verify_session_token

        try:
            claims = verify_session_token(token)
        except InvalidSessionError as e:
            logger.info("session_rejected", reason=str(e))
            request.auth_failed = True  # type: ignore[attr-defined]
            return

        user = User.objects.filter(id=claims.user_id, is_active=True).first()
        if user is None:
            logger.info("session_user_missing", user_id=claims.user_id)
            request.auth_failed = True  # type: ignore[attr-defined]
            return

        request.auth_user = user  # type: ignore[attr-defined]
        request.auth_session_id = claims.session_id  # type: ignore[attr-defined]
        bind_contextvars(**{"usr.id": str(user.id), "usr.email": user.email})
