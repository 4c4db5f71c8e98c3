import hashlib
import hmac
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from storefront.core.config import Settings, get_settings
from storefront.core.exceptions import ConfigurationError, UpstreamProviderError, ValidationError
from storefront.dependencies import get_services
from storefront.services.event_processor import EVENT_HANDLERS, IntegrationServices, dispatch_event

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


class PlatformEvent(BaseModel):
    name: str
    data: Dict[str, Any] = Field(default_factory=dict)


async def verify_webhook_signature(request: Request, settings: Settings = Depends(get_settings)):
    """Verify the HMAC signature of the event body when a webhook secret is set"""
    if not settings.WEBHOOK_SECRET:
        return

    signature = request.headers.get("X-Webhook-Signature")
    if not signature:
        raise HTTPException(status_code=401, detail="No signature provided")

    body = await request.body()
    expected_signature = hmac.new(
        settings.WEBHOOK_SECRET.encode(),
        body,
        hashlib.sha256
    ).hexdigest()

    if not hmac.compare_digest(signature, expected_signature):
        raise HTTPException(status_code=401, detail="Invalid signature")


@router.post("/webhooks/events")
async def platform_event_webhook(
    event: PlatformEvent,
    services: IntegrationServices = Depends(get_services),
    _: None = Depends(verify_webhook_signature),
):
    """Endpoint receiving subscriber events from the commerce platform"""
    if event.name not in EVENT_HANDLERS:
        return JSONResponse(status_code=202, content={"status": "ignored", "event": event.name})

    try:
        result = await dispatch_event(event.name, event.data, services)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConfigurationError as e:
        logger.error(f"Cannot handle {event.name}: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except UpstreamProviderError as e:
        logger.error(f"{e.provider} failed while handling {event.name}: {e}")
        raise HTTPException(status_code=502, detail=f"{e.provider}: {e.message}")

    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json")
    return {"status": "processed", "event": event.name, "result": result}
