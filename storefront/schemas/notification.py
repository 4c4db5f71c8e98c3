"""
Schemas for notification requests, send results and the inbound events that
trigger them.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.enums import SendStatus
from storefront.schemas.base import BaseSchema


class NotificationRequest(BaseModel):
    """A single notification to deliver. Consumed once, never stored."""

    to: Optional[str] = None
    template: str
    channel: str = "email"
    data: Dict[str, Any] = Field(default_factory=dict)


class SendResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: SendStatus
    data: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def skipped(cls) -> "SendResult":
        return cls(status=SendStatus.SKIPPED)

    @classmethod
    def unmatched(cls) -> "SendResult":
        return cls(status=SendStatus.UNMATCHED)

    @property
    def delivered(self) -> bool:
        return self.status == SendStatus.SENT


class NotificationEnvelope(BaseModel):
    """Uniform result handed back to the host's notification module."""

    to: Optional[str] = None
    status: str = "done"
    data: Dict[str, Any] = Field(default_factory=dict)


# --- Inbound event payloads ---

class InvitedUser(BaseSchema):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class InviteCreatedEvent(BaseSchema):
    user: Optional[InvitedUser] = None
    token: Optional[str] = None
    role: Optional[str] = None


class PasswordResetEvent(BaseSchema):
    entity_id: Optional[str] = None  # email address of the account
    token: Optional[str] = None
    actor_type: str = "customer"


class OrderPlacedEvent(BaseSchema):
    id: Optional[str] = None
    display_id: Optional[Any] = None
    email: Optional[str] = None


class ProductEvent(BaseSchema):
    id: Optional[str] = None
