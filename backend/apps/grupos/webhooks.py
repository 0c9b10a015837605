"""
Provisioning callback.

The automation POSTs {"id": <grupos id>, "JID": <group identifier>} once a
group exists. Plain Django view (not Django Ninja) so the raw body can be
checked against the signature headers.
"""

import json
import uuid

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.core.exceptions import PersistenceError, RecordNotFoundError
from apps.core.logging import get_logger
from apps.core.webhooks import mark_webhook_processed, verify_signed_request
from apps.grupos.services import apply_provisioning_result

logger = get_logger(__name__)

WEBHOOK_SOURCE = "group_provisioning"


@csrf_exempt
@require_POST
def provisioning_callback(request: HttpRequest) -> HttpResponse:
    """Apply an asynchronous provisioning result to its group."""
    if not settings.PROVISIONING_CALLBACK_SECRET:
        logger.error("provisioning_callback_secret_not_configured")
        return HttpResponse(status=500)

    body = request.body.decode("utf-8", errors="replace")
    if not verify_signed_request(body, request.headers, settings.PROVISIONING_CALLBACK_SECRET):
        logger.warning("provisioning_callback_invalid_signature")
        return HttpResponse(status=401)

    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("provisioning_callback_invalid_payload")
        return HttpResponse(status=400)

    group_id = payload.get("id") if isinstance(payload, dict) else None
    jid = payload.get("JID") if isinstance(payload, dict) else None
    if not group_id or not isinstance(jid, str) or not jid.strip():
        logger.warning("provisioning_callback_missing_fields")
        return HttpResponse(status=400)
    try:
        group_id = uuid.UUID(str(group_id))
    except ValueError:
        logger.warning("provisioning_callback_invalid_group_id")
        return HttpResponse(status=400)

    delivery_id = request.headers.get("X-Webhook-ID")
    if not delivery_id:
        return HttpResponse(status=400)

    try:
        group = apply_provisioning_result(group_id, jid.strip())
    except PersistenceError:
        # Not marked as processed, so the automation may redeliver
        return HttpResponse(status=503)
    except RecordNotFoundError:
        group = None

    if not mark_webhook_processed(WEBHOOK_SOURCE, delivery_id):
        return JsonResponse({"status": "duplicate"})

    if group is None:
        logger.warning("provisioning_callback_unknown_group", group_id=str(group_id))
        return HttpResponse(status=404)

    logger.info("provisioning_callback_applied", group_id=str(group.id), estado=group.estado)
    return JsonResponse({"status": "ok", "estado": group.estado})
