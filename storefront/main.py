# storefront/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from storefront.core.config import ResendModuleOptions, SanityModuleOptions, get_settings
from storefront.core.logging_config import configure_logging
from storefront.routes import health, webhooks
from storefront.services.event_processor import IntegrationServices
from storefront.services.notification_service import ResendNotificationService
from storefront.services.sanity_service import SanityModuleService

logger = logging.getLogger(__name__)


def build_services(settings) -> IntegrationServices:
    """Construct each integration whose credentials are present.

    Present-but-invalid options raise ConfigurationError here, at startup.
    """
    services = IntegrationServices(settings=settings)

    if settings.sanity_configured:
        services.sanity = SanityModuleService(SanityModuleOptions.from_settings(settings))
    else:
        logger.warning("SANITY_API_TOKEN / SANITY_PROJECT_ID not set; product sync disabled")

    if settings.resend_configured:
        services.notifications = ResendNotificationService(
            ResendModuleOptions.from_settings(settings),
            invite_url_prefix=settings.ADMIN_INVITE_URL_PREFIX,
        )
    else:
        logger.warning("RESEND_API_KEY / RESEND_FROM_EMAIL not set; email notifications disabled")

    return services


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    app.state.services = build_services(get_settings())
    yield


app = FastAPI(
    title="Storefront Integrations",
    description="Content sync and notification hooks for the commerce platform",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(webhooks.router)
