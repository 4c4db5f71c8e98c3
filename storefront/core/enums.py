"""
Shared enums and constants used across the application.
"""

from enum import Enum


class SyncDocumentType(str, Enum):
    """Domain record types that can be mirrored into the content store"""
    PRODUCT = "product"


class NotificationTemplate(str, Enum):
    ORDER_PLACED = "order-placed"
    RESET_PASSWORD = "reset-password"
    INVITE_ADMIN = "invite-admin"

    @classmethod
    def lookup(cls, value):
        """Return the member for ``value`` or None for ids we don't know about."""
        try:
            return cls(value)
        except ValueError:
            return None


class SendStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"      # emails disabled
    UNMATCHED = "unmatched"  # no template registered for the id


class SanityDataset(str, Enum):
    PRODUCTION = "production"
    DEVELOPMENT = "development"


# Locales carried on every synced document. Only English is sourced from the
# commerce platform, the rest are edited in the studio.
SOURCE_LOCALE = "en"
DOCUMENT_LOCALES = ("en", "pl", "fr")
