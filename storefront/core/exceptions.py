from typing import Any, Dict, Optional


class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class ConfigurationError(BaseServiceError):
    """Raised when module options are missing or invalid."""
    pass

class ValidationError(BaseServiceError):
    """Raised when an inbound event is missing required data."""
    pass

class PlatformServiceError(BaseServiceError):
    """Base exception for third-party platform errors."""
    pass

class UpstreamProviderError(PlatformServiceError):
    """Raised when a provider returns an error payload or cannot be reached."""

    provider = "upstream"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

class SanityAPIError(UpstreamProviderError):
    """Raised when Sanity API calls fail."""
    provider = "sanity"

class DocumentNotFoundError(SanityAPIError):
    """Raised when a document id does not exist in the content store."""
    pass

class DocumentConflictError(SanityAPIError):
    """Raised when creating a document whose id already exists."""
    pass

class ResendAPIError(UpstreamProviderError):
    """Raised when the Resend API cannot be reached."""
    provider = "resend"

class NotificationDeliveryError(UpstreamProviderError):
    """Raised when the mail provider rejects a send (unexpected state)."""
    provider = "resend"
    error_type = "unexpected_state"
