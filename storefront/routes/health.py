from fastapi import APIRouter, Depends

from storefront.dependencies import get_services
from storefront.services.event_processor import IntegrationServices

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(services: IntegrationServices = Depends(get_services)):
    """Basic health check, with which integrations were configured at startup"""
    notifications = services.notifications
    return {
        "status": "ok",
        "service": "Storefront Integrations",
        "integrations": {
            "sanity": services.sanity is not None,
            "resend": notifications is not None,
            "emails_enabled": bool(notifications and notifications.emails_enabled),
        },
    }
