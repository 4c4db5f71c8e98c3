# storefront/services/sanity/transformers.py
"""
Pure functions mapping platform records into Sanity document shapes.

Two transforms per SyncDocumentType:
  - create: the full document, store-only fields seeded with empty defaults.
  - update: a ``set`` patch holding only platform-sourced fields, so content
    edited in the studio is never overwritten by a sync.
"""

from typing import Any, Callable, Dict, Mapping

from storefront.core.enums import DOCUMENT_LOCALES, SOURCE_LOCALE, SyncDocumentType
from storefront.schemas.product import ProductRecord


def _localized(value: str = "") -> Dict[str, str]:
    """Per-locale field with only the source locale populated."""
    fields = {locale: "" for locale in DOCUMENT_LOCALES}
    fields[SOURCE_LOCALE] = value
    return fields


def transform_product_for_create(product: ProductRecord, document_type: str = "product") -> Dict[str, Any]:
    description = product.description or ""
    return {
        "_type": document_type,
        "_id": product.id,  # platform id doubles as the Sanity document id
        "medusaId": product.id,
        "title": product.title,
        "description": description,
        "localizedTitles": _localized(product.title),
        "localizedDescriptions": _localized(description),
        # Studio-only content below, seeded once and never patched by sync
        "localizedShortDescriptions": _localized(),
        "materials": _localized(),
        "colors": _localized(),
        "brand": "",
        "productionYear": None,
        "specs": [
            {
                "_key": product.id,
                "_type": "spec",
                "title": product.title,
                "lang": SOURCE_LOCALE,
            },
        ],
    }


def transform_product_for_update(product: ProductRecord) -> Dict[str, Any]:
    patch = {
        "title": product.title,
        "medusaId": product.id,
        f"localizedTitles.{SOURCE_LOCALE}": product.title,
    }

    # A missing description must not erase the one edited in the studio
    if product.description:
        patch["description"] = product.description
        patch[f"localizedDescriptions.{SOURCE_LOCALE}"] = product.description

    return patch


CreateTransformer = Callable[..., Dict[str, Any]]
UpdateTransformer = Callable[[Any], Dict[str, Any]]

CREATE_TRANSFORMERS: Mapping[SyncDocumentType, CreateTransformer] = {
    SyncDocumentType.PRODUCT: transform_product_for_create,
}

UPDATE_TRANSFORMERS: Mapping[SyncDocumentType, UpdateTransformer] = {
    SyncDocumentType.PRODUCT: transform_product_for_update,
}

RECORD_SCHEMAS = {
    SyncDocumentType.PRODUCT: ProductRecord,
}


def get_create_transformer(document_type: SyncDocumentType) -> CreateTransformer:
    return CREATE_TRANSFORMERS[SyncDocumentType(document_type)]


def get_update_transformer(document_type: SyncDocumentType) -> UpdateTransformer:
    return UPDATE_TRANSFORMERS[SyncDocumentType(document_type)]


def coerce_record(document_type: SyncDocumentType, record):
    """Accept either the schema instance or a raw mapping from the platform."""
    schema = RECORD_SCHEMAS[SyncDocumentType(document_type)]
    if isinstance(record, schema):
        return record
    return schema.model_validate(record)
