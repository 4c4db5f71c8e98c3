# tests/unit/services/test_email_templates.py
import pytest
from jinja2 import UndefinedError

from storefront.core.enums import NotificationTemplate
from storefront.services.email_templates import (
    EMAIL_TEMPLATES,
    format_money,
    render_invite_admin,
    render_order_placed,
    render_reset_password,
)


def test_every_template_is_registered():
    assert set(EMAIL_TEMPLATES) == set(NotificationTemplate)


def test_invite_admin_default_subject():
    assert EMAIL_TEMPLATES[NotificationTemplate.INVITE_ADMIN].default_subject == "Admin Team Invitation"


def test_invite_admin_renders_accept_link():
    rendered = render_invite_admin(
        token="T1",
        user={"email": "a@b.com", "first_name": "Ada"},
        invite_url_prefix="https://admin.example.com/",
    )

    assert 'href="https://admin.example.com/invite?token=T1"' in rendered.html
    assert "Hello Ada," in rendered.html
    assert "Accept Invitation" in rendered.html
    assert "https://admin.example.com/invite?token=T1" in rendered.text


def test_invite_admin_encodes_token():
    rendered = render_invite_admin(token="a+b/c", user={"email": "a@b.com"})

    assert "https://admin.example.com/invite?token=a%2Bb%2Fc" in rendered.text


def test_invite_admin_prefers_ready_made_url():
    rendered = render_invite_admin(
        token="T1",
        user={"email": "a@b.com"},
        invite_url_prefix="https://admin.example.com",
        invite_url="https://console.example.com/invite?token=T1",
    )

    assert "https://console.example.com/invite?token=T1" in rendered.text
    assert "admin.example.com" not in rendered.text


def test_invite_admin_without_first_name():
    rendered = render_invite_admin(token="T1", user={"email": "a@b.com"})

    assert "Hello ," in rendered.html
    assert "/invite?token=T1" in rendered.html


def test_html_is_escaped():
    rendered = render_invite_admin(token="T1", user={"email": "a@b.com", "first_name": "<script>"})

    assert "<script>" not in rendered.html
    assert "&lt;script&gt;" in rendered.html


def test_reset_password_renders_url():
    rendered = render_reset_password(url="https://shop.example.com/reset-password?token=abc")

    assert "https://shop.example.com/reset-password?token=abc" in rendered.html
    assert "https://shop.example.com/reset-password?token=abc" in rendered.text


def test_order_placed_renders_items_and_total():
    rendered = render_order_placed(order={
        "id": "order_1",
        "display_id": 42,
        "currency_code": "eur",
        "items": [{"title": "Chair", "quantity": 2, "unit_price": 120}],
        "total": 240,
    })

    assert "Order #42 has been placed." in rendered.html
    assert "Chair" in rendered.html
    assert "240.00 EUR" in rendered.html
    assert "- Chair x 2: 120.00 EUR" in rendered.text


def test_order_placed_requires_an_order_id():
    """Malformed data surfaces while rendering"""
    with pytest.raises(UndefinedError):
        render_order_placed(order={"email": "a@b.com"})


@pytest.mark.parametrize("amount, currency, expected", [
    (None, "eur", ""),
    (1234.5, "usd", "1,234.50 USD"),
    (10, None, "10.00"),
])
def test_format_money(amount, currency, expected):
    assert format_money(amount, currency) == expected
