# tests/conftest.py
import pytest
from unittest.mock import AsyncMock

from storefront.core.config import Settings
from storefront.services.notification_service import ResendNotificationService
from storefront.services.resend.client import ResendClient, ResendResponse
from storefront.services.sanity_service import SanityModuleService
from tests.mocks.mock_sanity import MockSanityClient


@pytest.fixture
def settings():
    """Provide test settings without reading the environment's .env file"""
    return Settings(
        _env_file=None,
        SANITY_API_TOKEN="sk-test",
        SANITY_PROJECT_ID="abc123",
        SANITY_API_VERSION="2024-01-01",
        SANITY_STUDIO_URL="http://localhost:3000/studio",
        RESEND_API_KEY="re_test",
        RESEND_FROM_EMAIL="shop@example.com",
        RESEND_REPLY_TO_EMAIL="support@example.com",
        TO_EMAIL="ops@example.com",
        ENABLE_EMAIL_NOTIFICATIONS="true",
        ADMIN_INVITE_URL_PREFIX="https://admin.example.com",
        STOREFRONT_URL="https://shop.example.com",
        COMPANY_NAME="Acme",
    )


@pytest.fixture
def sanity_options():
    return {
        "api_token": "sk-test",
        "project_id": "abc123",
        "api_version": "2024-01-01",
        "dataset": "production",
        "studio_url": "http://localhost:3000/studio",
    }


@pytest.fixture
def resend_options():
    return {
        "api_key": "re_test",
        "from_email": "shop@example.com",
        "reply_to_email": "support@example.com",
        "to_email": "ops@example.com",
        "enable_emails": True,
    }


@pytest.fixture
def mock_sanity_client():
    return MockSanityClient()


@pytest.fixture
def sanity_service(sanity_options, mock_sanity_client):
    return SanityModuleService(sanity_options, client=mock_sanity_client)


@pytest.fixture
def mock_resend_client():
    """ResendClient double whose send() succeeds unless reconfigured"""
    client = AsyncMock(spec=ResendClient)
    client.send.return_value = ResendResponse(data={"id": "email_123"})
    return client


@pytest.fixture
def notification_service(resend_options, mock_resend_client):
    return ResendNotificationService(
        resend_options,
        client=mock_resend_client,
        invite_url_prefix="https://admin.example.com",
    )


@pytest.fixture
def sample_product_data():
    """Provide sample product data as the platform sends it"""
    return {
        "id": "prod_01",
        "title": "Chair",
        "description": "Oak chair",
        "handle": "chair",
        "status": "published",
    }
