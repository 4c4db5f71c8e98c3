# tests/unit/services/resend/test_resend_client.py
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from storefront.core.exceptions import ResendAPIError
from storefront.services.resend.client import ResendClient


def mock_post(mocker, status_code=200, json_data=None, text=""):
    mock_client_cls = mocker.patch("httpx.AsyncClient")
    http = AsyncMock()
    mock_client_cls.return_value.__aenter__.return_value = http
    response = MagicMock()
    response.status_code = status_code
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data or {}
    response.text = text
    http.post.return_value = response
    return http


@pytest.mark.asyncio
async def test_send_posts_email_payload(mocker):
    http = mock_post(mocker, json_data={"id": "email_123"})

    response = await ResendClient(api_key="re_test").send(
        from_="shop@example.com",
        to=["a@b.com"],
        subject="Hello",
        html="<p>Hi</p>",
        text="Hi",
        reply_to="support@example.com",
    )

    args, kwargs = http.post.call_args
    assert args[0] == "https://api.resend.com/emails"
    assert kwargs["headers"]["Authorization"] == "Bearer re_test"
    assert kwargs["json"] == {
        "from": "shop@example.com",
        "to": ["a@b.com"],
        "subject": "Hello",
        "html": "<p>Hi</p>",
        "text": "Hi",
        "reply_to": "support@example.com",
    }
    assert response.data == {"id": "email_123"}
    assert response.error is None


@pytest.mark.asyncio
async def test_send_omits_optional_fields(mocker):
    http = mock_post(mocker, json_data={"id": "email_123"})

    await ResendClient(api_key="re_test").send(
        from_="shop@example.com", to=["a@b.com"], subject="Hello", html="<p>Hi</p>"
    )

    _, kwargs = http.post.call_args
    assert "reply_to" not in kwargs["json"]
    assert "text" not in kwargs["json"]


@pytest.mark.asyncio
async def test_api_errors_are_returned_not_raised(mocker):
    mock_post(
        mocker,
        status_code=422,
        json_data={"statusCode": 422, "name": "validation_error", "message": "Invalid `to` field"},
    )

    response = await ResendClient(api_key="re_test").send(
        from_="shop@example.com", to=["nope"], subject="Hello", html="<p>Hi</p>"
    )

    assert response.data is None
    assert response.error == {
        "name": "validation_error",
        "message": "Invalid `to` field",
        "status_code": 422,
    }


@pytest.mark.asyncio
async def test_non_json_error_body(mocker):
    mock_post(mocker, status_code=502, json_data=ValueError("no json"), text="Bad Gateway")

    response = await ResendClient(api_key="re_test").send(
        from_="shop@example.com", to=["a@b.com"], subject="Hello", html="<p>Hi</p>"
    )

    assert response.error["message"] == "Bad Gateway"
    assert response.error["name"] == "application_error"


@pytest.mark.asyncio
async def test_network_error_raises(mocker):
    mock_client_cls = mocker.patch("httpx.AsyncClient")
    mock_client_cls.return_value.__aenter__.return_value.post = AsyncMock(
        side_effect=httpx.ConnectError("Connection refused")
    )

    with pytest.raises(ResendAPIError) as exc_info:
        await ResendClient(api_key="re_test").send(
            from_="shop@example.com", to=["a@b.com"], subject="Hello", html="<p>Hi</p>"
        )

    assert "Connection refused" in str(exc_info.value)
    assert exc_info.value.provider == "resend"
