"""
Handlers for commerce platform events.

Each handler validates the event payload, then hands off to the sync or
notification service. Missing required data raises ValidationError straight
away; retrying or dead-lettering the event is left to whoever delivered it.
Nothing here swallows a service error.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Type, TypeVar
from urllib.parse import urlencode

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from storefront.core.config import Settings
from storefront.core.enums import NotificationTemplate, SyncDocumentType
from storefront.core.exceptions import ConfigurationError, ValidationError
from storefront.schemas.notification import (
    InviteCreatedEvent,
    NotificationRequest,
    OrderPlacedEvent,
    PasswordResetEvent,
    ProductEvent,
)
from storefront.services.notification_service import ResendNotificationService
from storefront.services.sanity.transformers import coerce_record
from storefront.services.sanity_service import SanityModuleService

logger = logging.getLogger(__name__)

EventModel = TypeVar("EventModel", bound=BaseModel)


def _parse_event(model: Type[EventModel], data: Mapping[str, Any], event_name: str) -> EventModel:
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(f"Malformed payload for {event_name} event: {exc}") from exc


def _link(base_url: str, path: str, **query) -> str:
    return f"{base_url.rstrip('/')}/{path}?{urlencode(query)}"


@dataclass
class IntegrationServices:
    """The services an event handler may need, built once at startup."""
    settings: Settings
    sanity: Optional[SanityModuleService] = None
    notifications: Optional[ResendNotificationService] = None

    def require_sanity(self) -> SanityModuleService:
        if self.sanity is None:
            raise ConfigurationError("Sanity module is not configured")
        return self.sanity

    def require_notifications(self) -> ResendNotificationService:
        if self.notifications is None:
            raise ConfigurationError("Resend notification provider is not configured")
        return self.notifications


async def handle_invite_created(data: Mapping[str, Any], services: IntegrationServices):
    event = _parse_event(InviteCreatedEvent, data, "invite.created")
    if not event.user or not event.user.email or not event.token:
        raise ValidationError("Missing required data for invite.created event")

    admin_url = services.settings.ADMIN_INVITE_URL_PREFIX
    if not admin_url:
        raise ValidationError("ADMIN_INVITE_URL_PREFIX environment variable is not set")

    logger.info(f"Processing admin invite for {event.user.email}")
    company = services.settings.COMPANY_NAME or "our"
    request = NotificationRequest(
        to=event.user.email,
        channel="email",
        template=NotificationTemplate.INVITE_ADMIN.value,
        data={
            "token": event.token,
            "user": event.user.model_dump(exclude_none=True),
            "subject": f"You've been invited to join {company} admin team",
            "accept_invite_url": _link(admin_url, "invite", token=event.token),
        },
    )

    try:
        envelope = await services.require_notifications().send_notification("invite.created", request)
    except Exception as e:
        logger.error(f"Admin invite notification failed: {e}")
        raise
    logger.info(f"Invite email processed for {event.user.email}")
    return envelope


async def handle_password_reset(data: Mapping[str, Any], services: IntegrationServices):
    event = _parse_event(PasswordResetEvent, data, "auth.password_reset")
    if not event.entity_id or not event.token:
        raise ValidationError("Missing required data for auth.password_reset event")

    settings = services.settings
    if event.actor_type == "customer":
        setting_name = "STOREFRONT_URL"
    else:
        setting_name = "ADMIN_INVITE_URL_PREFIX"
    base_url = getattr(settings, setting_name)
    if not base_url:
        raise ValidationError(f"{setting_name} environment variable is not set")

    logger.info(f"Processing password reset for {event.entity_id} ({event.actor_type})")
    request = NotificationRequest(
        to=event.entity_id,
        template=NotificationTemplate.RESET_PASSWORD.value,
        data={
            "url": _link(base_url, "reset-password", token=event.token, email=event.entity_id),
        },
    )
    return await services.require_notifications().send_notification("auth.password_reset", request)


async def handle_order_placed(data: Mapping[str, Any], services: IntegrationServices):
    event = _parse_event(OrderPlacedEvent, data, "order.placed")
    if not event.id:
        raise ValidationError("Missing order id for order.placed event")

    order = event.model_dump(exclude_none=True)
    order.setdefault("subject", f"Order confirmation #{event.display_id or event.id}")

    logger.info(f"Processing order confirmation for order {event.id}")
    request = NotificationRequest(
        to=event.email,
        template=NotificationTemplate.ORDER_PLACED.value,
        data=order,
    )
    return await services.require_notifications().send_notification("order.placed", request)


async def handle_product_upserted(data: Mapping[str, Any], services: IntegrationServices):
    event = _parse_event(ProductEvent, data, "product")
    if not event.id or not data.get("title"):
        raise ValidationError("Product events need at least an id and a title to sync")
    try:
        record = coerce_record(SyncDocumentType.PRODUCT, data)
    except PydanticValidationError as exc:
        raise ValidationError(f"Malformed product payload for {event.id}: {exc}") from exc

    logger.info(f"Syncing product {event.id} to Sanity")
    return await services.require_sanity().upsert_sync_document(SyncDocumentType.PRODUCT, record)


async def handle_product_deleted(data: Mapping[str, Any], services: IntegrationServices):
    event = _parse_event(ProductEvent, data, "product.deleted")
    if not event.id:
        raise ValidationError("Missing product id for product.deleted event")

    logger.info(f"Removing product {event.id} from Sanity")
    return await services.require_sanity().delete(event.id)


EventHandler = Callable[[Mapping[str, Any], IntegrationServices], Awaitable[Any]]

EVENT_HANDLERS: Dict[str, EventHandler] = {
    "invite.created": handle_invite_created,
    "invite.resent": handle_invite_created,
    "auth.password_reset": handle_password_reset,
    "order.placed": handle_order_placed,
    "product.created": handle_product_upserted,
    "product.updated": handle_product_upserted,
    "product.deleted": handle_product_deleted,
}


async def dispatch_event(name: str, data: Mapping[str, Any], services: IntegrationServices):
    """Run the handler registered for ``name``; returns None when there isn't one."""
    handler = EVENT_HANDLERS.get(name)
    if handler is None:
        logger.debug(f"No handler registered for event {name}")
        return None
    return await handler(data or {}, services)
