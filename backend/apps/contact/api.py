"""
Contact API endpoint (public).
"""

from django.conf import settings
from django.http import HttpRequest
from ninja import Router

from apps.contact.schemas import ContactRequestCreate, ContactRequestResponse
from apps.contact.services import submit_contact_request
from apps.core.schemas import ErrorResponse
from apps.core.throttling import throttle_client

router = Router(tags=["contact"])

CONTACT_WINDOW_SECONDS = 3600


@router.post(
    "",
    response={201: ContactRequestResponse, 400: ErrorResponse, 429: ErrorResponse, 503: ErrorResponse},
    auth=None,
    operation_id="submitContactRequest",
    summary="Submit contact form",
)
def submit(request: HttpRequest, payload: ContactRequestCreate) -> tuple[int, ContactRequestResponse]:
    """
    Leave a contact request.

    Rate limited per client IP.
    """
    throttle_client(
        request,
        "contact",
        max_requests=settings.CONTACT_RATE_LIMIT_PER_HOUR,
        window_seconds=CONTACT_WINDOW_SECONDS,
    )

    contact = submit_contact_request(payload)
    return 201, ContactRequestResponse(id=contact.id, estado=contact.estado, created_at=contact.created_at)
