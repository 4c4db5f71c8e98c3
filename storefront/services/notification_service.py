"""Transactional email notifications delivered through Resend."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Union

from storefront.core.config import ResendModuleOptions
from storefront.core.enums import NotificationTemplate, SendStatus
from storefront.core.exceptions import NotificationDeliveryError
from storefront.schemas.notification import NotificationEnvelope, NotificationRequest, SendResult
from storefront.services.email_templates import EMAIL_TEMPLATES, RenderedEmail
from storefront.services.resend.client import ResendClient

logger = logging.getLogger(__name__)


class ResendNotificationService:
    """Renders a template for each notification request and sends it via Resend.

    Sends are gated by ``enable_emails`` so the subscribers can stay wired up
    while delivery is muted. Unknown template ids are ignored, which lets
    newer event producers add templates before this service knows them.
    """

    identifier = "resend-notification"

    def __init__(
        self,
        options: Union[ResendModuleOptions, Mapping[str, Any]],
        client: Optional[ResendClient] = None,
        invite_url_prefix: Optional[str] = None,
    ):
        self.options = ResendModuleOptions.load(options, self.identifier)
        self._client = client or ResendClient(self.options.api_key)
        self._invite_url_prefix = invite_url_prefix
        self._handlers = {
            NotificationTemplate.ORDER_PLACED: self._send_order_placed_mail,
            NotificationTemplate.RESET_PASSWORD: self._send_reset_password_mail,
            NotificationTemplate.INVITE_ADMIN: self._send_invite_admin_mail,
        }

    @property
    def emails_enabled(self) -> bool:
        return self.options.enable_emails

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def send(self, notification: Union[NotificationRequest, Mapping[str, Any]]) -> SendResult:
        """Deliver one notification.

        Returns a SKIPPED result when emails are disabled and UNMATCHED when no
        template is registered for ``notification.template``; neither touches
        the mail provider. Rendering and provider failures propagate.
        """
        notification = NotificationRequest.model_validate(notification)
        logger.info("Sending notification: %s", notification.template)

        if not self.emails_enabled:
            logger.info("Emails are disabled. Enable them by setting enable_emails to true.")
            return SendResult.skipped()

        template = NotificationTemplate.lookup(notification.template)
        if template is None:
            logger.warning("No email template registered for %r; nothing sent", notification.template)
            return SendResult.unmatched()

        data = await self._handlers[template](notification)
        return SendResult(status=SendStatus.SENT, data=data)

    async def send_notification(
        self,
        event: str,
        notification: Union[NotificationRequest, Mapping[str, Any]],
        attachment_generator: Any = None,
    ) -> NotificationEnvelope:
        """Adapter for the host notification module; errors from ``send`` propagate."""
        notification = NotificationRequest.model_validate(notification)
        result = await self.send(notification)
        logger.debug("Notification for %s finished with status %s", event, result.status.value)
        return NotificationEnvelope(to=notification.to, status="done", data=result.data)

    async def send_mail(
        self,
        subject: str,
        content: RenderedEmail,
        to: Optional[str] = None,
    ) -> Dict[str, Any]:
        recipient = to or self.options.to_email

        try:
            response = await self._client.send(
                from_=self.options.from_email,
                reply_to=self.options.reply_to_email,
                to=[recipient],
                subject=subject,
                html=content.html,
                text=content.text,
            )
            if response.error:
                raise NotificationDeliveryError(
                    response.error.get("message") or "Unknown Resend error",
                    {"to": recipient, "subject": subject, "provider_error": response.error},
                )
        except Exception as exc:
            logger.error("Failed to send email to %s with subject: %s (%s)", recipient, subject, exc)
            raise

        logger.info("Email sent to %s with subject: %s", recipient, subject)
        return response.data or {}

    # ------------------------------------------------------------------
    # Template handlers
    # ------------------------------------------------------------------
    def _subject(self, template: NotificationTemplate, notification: NotificationRequest) -> str:
        return notification.data.get("subject") or EMAIL_TEMPLATES[template].default_subject

    async def _send_order_placed_mail(self, notification: NotificationRequest) -> Dict[str, Any]:
        template = NotificationTemplate.ORDER_PLACED
        content = EMAIL_TEMPLATES[template].render(order=notification.data)
        return await self.send_mail(self._subject(template, notification), content, notification.to)

    async def _send_reset_password_mail(self, notification: NotificationRequest) -> Dict[str, Any]:
        template = NotificationTemplate.RESET_PASSWORD
        content = EMAIL_TEMPLATES[template].render(url=notification.data["url"])
        return await self.send_mail(self._subject(template, notification), content, notification.to)

    async def _send_invite_admin_mail(self, notification: NotificationRequest) -> Dict[str, Any]:
        template = NotificationTemplate.INVITE_ADMIN
        content = EMAIL_TEMPLATES[template].render(
            token=notification.data["token"],
            user=notification.data["user"],
            invite_url_prefix=self._invite_url_prefix,
            invite_url=notification.data.get("accept_invite_url"),
        )
        return await self.send_mail(self._subject(template, notification), content, notification.to)
