import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from storefront.core.exceptions import ResendAPIError

logger = logging.getLogger(__name__)


@dataclass
class ResendResponse:
    """Either ``data`` (the created email, e.g. ``{"id": ...}``) or ``error`` is set."""
    data: Optional[Dict[str, Any]] = None
    error: Optional[Dict[str, Any]] = None


class ResendClient:
    """
    Minimal async client for the Resend emails endpoint.

    API errors come back in ``ResendResponse.error`` rather than being raised,
    callers decide how to classify them. Network failures raise ResendAPIError.

    Documentation: https://resend.com/docs/api-reference/emails/send-email
    """

    BASE_URL = "https://api.resend.com"

    def __init__(self, api_key: str, timeout: float = 30.0):
        self.api_key = api_key
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def send(
        self,
        from_: str,
        to: List[str],
        subject: str,
        html: str,
        text: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> ResendResponse:
        payload: Dict[str, Any] = {
            "from": from_,
            "to": to,
            "subject": subject,
            "html": html,
        }
        if text:
            payload["text"] = text
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.BASE_URL}/emails",
                    headers=self._get_headers(),
                    json=payload,
                )
        except httpx.TimeoutException as e:
            logger.error(f"Resend timeout error: {str(e)}")
            raise ResendAPIError(f"Request timed out: {str(e)}")
        except httpx.RequestError as e:
            logger.error(f"Resend network error: {str(e)}")
            raise ResendAPIError(f"Network error: {str(e)}")

        if response.status_code in (200, 201, 202):
            return ResendResponse(data=response.json())

        try:
            body = response.json()
        except ValueError:
            body = {"message": response.text}
        return ResendResponse(
            error={
                "name": body.get("name", "application_error"),
                "message": body.get("message") or response.text,
                "status_code": response.status_code,
            }
        )
