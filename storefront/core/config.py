# storefront/core/config.py

import os
from datetime import date
from functools import lru_cache
from types import MappingProxyType
from typing import Annotated, Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings

from storefront.core.enums import SanityDataset, SyncDocumentType
from storefront.core.exceptions import ConfigurationError


def _today() -> str:
    return date.today().isoformat()


def _parse_enabled_flag(value) -> bool:
    """Booleans pass through; anything else is true only when it reads "true"."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Sanity (content store)
    SANITY_API_TOKEN: str = ""
    SANITY_PROJECT_ID: str = ""
    SANITY_API_VERSION: str = Field(default_factory=_today)
    SANITY_DATASET: str = SanityDataset.PRODUCTION.value
    SANITY_STUDIO_URL: Optional[str] = "http://localhost:3000/studio"
    SANITY_TYPE_MAP: Dict[str, str] = {}

    # Resend (transactional email)
    RESEND_API_KEY: str = ""
    RESEND_FROM_EMAIL: str = ""
    RESEND_REPLY_TO_EMAIL: Optional[str] = None
    TO_EMAIL: Optional[str] = None
    ENABLE_EMAIL_NOTIFICATIONS: Union[bool, str] = False

    # Links embedded in notifications
    ADMIN_INVITE_URL_PREFIX: Optional[str] = None
    STOREFRONT_URL: Optional[str] = None
    COMPANY_NAME: Optional[str] = None

    # Inbound webhooks
    WEBHOOK_SECRET: str = ""

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists('.env') else None,
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def sanity_configured(self) -> bool:
        return bool(self.SANITY_API_TOKEN and self.SANITY_PROJECT_ID)

    @property
    def resend_configured(self) -> bool:
        return bool(self.RESEND_API_KEY and self.RESEND_FROM_EMAIL)


class ModuleOptions(BaseModel):
    """Immutable options captured once when a service is constructed."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def load(cls, raw: Union["ModuleOptions", Mapping[str, Any]], module: str):
        """Validate ``raw`` into options, raising ConfigurationError on failure."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls.model_validate(dict(raw or {}))
        except PydanticValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise ConfigurationError(f"Invalid options for {module}: {problems}") from exc


class SanityModuleOptions(ModuleOptions):
    api_token: str = Field(min_length=1)
    project_id: str = Field(min_length=1)
    api_version: str = Field(default_factory=_today, min_length=1)
    dataset: SanityDataset = SanityDataset.PRODUCTION
    type_map: Dict[SyncDocumentType, str] = {}
    studio_url: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SanityModuleOptions":
        return cls.load(
            {
                "api_token": settings.SANITY_API_TOKEN,
                "project_id": settings.SANITY_PROJECT_ID,
                "api_version": settings.SANITY_API_VERSION,
                "dataset": settings.SANITY_DATASET,
                "type_map": settings.SANITY_TYPE_MAP,
                "studio_url": settings.SANITY_STUDIO_URL or None,
            },
            "sanity",
        )


class ResendModuleOptions(ModuleOptions):
    api_key: str = Field(min_length=1)
    from_email: str = Field(min_length=1)
    reply_to_email: Optional[str] = None
    to_email: str = Field(min_length=1)
    enable_emails: Annotated[bool, BeforeValidator(_parse_enabled_flag)] = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResendModuleOptions":
        return cls.load(
            {
                "api_key": settings.RESEND_API_KEY,
                "from_email": settings.RESEND_FROM_EMAIL,
                "reply_to_email": settings.RESEND_REPLY_TO_EMAIL or None,
                "to_email": settings.TO_EMAIL or None,
                "enable_emails": settings.ENABLE_EMAIL_NOTIFICATIONS,
            },
            "resend-notification",
        )


DEFAULT_TYPE_MAP = {
    SyncDocumentType.PRODUCT: "product",
}


def build_type_map(overrides: Optional[Mapping[Any, str]] = None) -> Mapping[SyncDocumentType, str]:
    """Defaults first, then caller overrides; the result is read-only."""
    merged = dict(DEFAULT_TYPE_MAP)
    for key, value in (overrides or {}).items():
        merged[SyncDocumentType(key)] = value
    return MappingProxyType(merged)


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()
