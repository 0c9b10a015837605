"""
Django Ninja API configuration.
"""

from django.http import HttpRequest, HttpResponse
from ninja import NinjaAPI

from apps.accounts.api import auth_router, profile_router, users_router
from apps.accounts.services import OrganizationAccessError
from apps.contact.api import router as contact_router
from apps.core.exceptions import InputValidationError, PersistenceError, RecordNotFoundError, UploadError
from apps.core.logging import get_logger
from apps.core.throttling import RateLimitExceeded
from apps.cpls.api import router as cpls_router
from apps.grupos.api import router as grupos_router
from apps.organizations.api import router as organizations_router

logger = get_logger(__name__)

api = NinjaAPI(
    title="CPL Manager API",
    version="1.0.0",
    description="Multi-tenant scheduling of WhatsApp campaign content (CPLs) and groups.",
    openapi_extra={
        "info": {
            "contact": {"name": "API Support"},
        },
        "tags": [
            {"name": "auth", "description": "Sign-in, sign-out and resolved access"},
            {"name": "organizations", "description": "Tenant management (super admin)"},
            {"name": "users", "description": "Members of the selected organization"},
            {"name": "profile", "description": "Own profile and device linking"},
            {"name": "grupos", "description": "WhatsApp groups and their provisioning"},
            {"name": "cpls", "description": "Scheduled campaign content"},
            {"name": "contact", "description": "Public contact form"},
            {"name": "health", "description": "Service health and readiness checks"},
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT",
                    "description": "Session JWT from /auth/login. Include as: Authorization: Bearer <credential>. "
                    "Send X-Organization-Id to act within a specific organization.",
                }
            }
        },
    },
)

# Register routers
api.add_router("/auth", auth_router)
api.add_router("/organizations", organizations_router)
api.add_router("/users", users_router)
api.add_router("/profile", profile_router)
api.add_router("/grupos", grupos_router)
api.add_router("/cpls", cpls_router)
api.add_router("/contact", contact_router)


def _error(request: HttpRequest, detail: str, status: int) -> HttpResponse:
    return api.create_response(request, {"detail": detail}, status=status)


@api.exception_handler(InputValidationError)
def handle_input_validation(request: HttpRequest, exc: InputValidationError) -> HttpResponse:
    return _error(request, str(exc), 400)


@api.exception_handler(OrganizationAccessError)
def handle_organization_access(request: HttpRequest, exc: OrganizationAccessError) -> HttpResponse:
    return _error(request, str(exc), 403)


@api.exception_handler(RecordNotFoundError)
def handle_not_found(request: HttpRequest, exc: RecordNotFoundError) -> HttpResponse:
    return _error(request, "Not found", 404)


@api.exception_handler(UploadError)
def handle_upload(request: HttpRequest, exc: UploadError) -> HttpResponse:
    return _error(request, "Error al subir el archivo", 502)


@api.exception_handler(PersistenceError)
def handle_persistence(request: HttpRequest, exc: PersistenceError) -> HttpResponse:
    logger.warning("persistence_error_returned", error=str(exc))
    return _error(request, "El servicio de datos no está disponible", 503)


@api.exception_handler(RateLimitExceeded)
def handle_rate_limit(request: HttpRequest, exc: RateLimitExceeded) -> HttpResponse:
    response = _error(request, str(exc), 429)
    response["Retry-After"] = str(exc.retry_after)
    return response


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """Health check endpoint for load balancer."""
    return {"status": "ok"}
