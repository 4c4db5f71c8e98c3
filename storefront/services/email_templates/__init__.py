"""
Email template registry.

Each NotificationTemplate maps to a render function and a fallback subject.
Template data is not validated up front: a missing required key raises from
Jinja (StrictUndefined) while rendering, and the caller treats that like any
other send failure.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from storefront.core.enums import NotificationTemplate

DEFAULT_INVITE_URL_PREFIX = "https://admin.example.com"


def format_money(amount, currency_code: Optional[str] = None) -> str:
    if amount is None:
        return ""
    formatted = f"{float(amount):,.2f}"
    return f"{formatted} {currency_code.upper()}" if currency_code else formatted


env = Environment(
    loader=PackageLoader("storefront", "templates/emails"),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)
env.filters["money"] = format_money


@dataclass(frozen=True)
class RenderedEmail:
    html: str
    text: str


def _render(name: str, **context) -> RenderedEmail:
    return RenderedEmail(
        html=env.get_template(f"{name}.html").render(**context),
        text=env.get_template(f"{name}.txt").render(**context),
    )


def render_order_placed(order: Mapping[str, Any]) -> RenderedEmail:
    return _render("order_placed", order=order)


def render_reset_password(url: str) -> RenderedEmail:
    return _render("reset_password", url=url)


def render_invite_admin(
    token: str,
    user: Mapping[str, Any],
    invite_url_prefix: Optional[str] = None,
    invite_url: Optional[str] = None,
) -> RenderedEmail:
    """Render the admin invite; a ready-made ``invite_url`` wins over building one from the prefix."""
    if not invite_url:
        prefix = (invite_url_prefix or DEFAULT_INVITE_URL_PREFIX).rstrip("/")
        invite_url = f"{prefix}/invite?{urlencode({'token': token})}"
    return _render("invite_admin", user=user, invite_url=invite_url)


@dataclass(frozen=True)
class EmailTemplate:
    render: Callable[..., RenderedEmail]
    default_subject: Optional[str] = None


EMAIL_TEMPLATES: Dict[NotificationTemplate, EmailTemplate] = {
    NotificationTemplate.ORDER_PLACED: EmailTemplate(render_order_placed, "Your order has been placed"),
    NotificationTemplate.RESET_PASSWORD: EmailTemplate(render_reset_password, "Reset your password"),
    NotificationTemplate.INVITE_ADMIN: EmailTemplate(render_invite_admin, "Admin Team Invitation"),
}
