# tests/unit/services/sanity/test_transformers.py
import pytest

from storefront.core.enums import SyncDocumentType
from storefront.schemas.product import ProductRecord
from storefront.services.sanity.transformers import (
    coerce_record,
    get_create_transformer,
    get_update_transformer,
    transform_product_for_create,
    transform_product_for_update,
)

STORE_ONLY_FIELDS = {
    "localizedShortDescriptions",
    "materials",
    "colors",
    "brand",
    "productionYear",
    "specs",
}


def test_create_document_for_product_without_description():
    """A new product gets its id as document id and empty non-English locales"""
    product = ProductRecord(id="p1", title="Chair")

    document = transform_product_for_create(product)

    assert document["_id"] == "p1"
    assert document["_type"] == "product"
    assert document["medusaId"] == "p1"
    assert document["title"] == "Chair"
    assert document["description"] == ""
    assert document["localizedTitles"] == {"en": "Chair", "pl": "", "fr": ""}
    assert document["localizedDescriptions"] == {"en": "", "pl": "", "fr": ""}
    assert document["localizedShortDescriptions"] == {"en": "", "pl": "", "fr": ""}
    assert document["materials"] == {"en": "", "pl": "", "fr": ""}
    assert document["colors"] == {"en": "", "pl": "", "fr": ""}
    assert document["brand"] == ""
    assert document["productionYear"] is None
    assert document["specs"] == [{"_key": "p1", "_type": "spec", "title": "Chair", "lang": "en"}]


def test_create_document_uses_mapped_type_name():
    document = transform_product_for_create(ProductRecord(id="p1", title="Chair"), "catalogProduct")
    assert document["_type"] == "catalogProduct"


def test_create_document_copies_description_into_english_locale():
    product = ProductRecord(id="p1", title="Chair", description="Oak chair")

    document = transform_product_for_create(product)

    assert document["description"] == "Oak chair"
    assert document["localizedDescriptions"] == {"en": "Oak chair", "pl": "", "fr": ""}


def test_update_patch_with_description():
    product = ProductRecord(id="p1", title="Chair", description="Oak chair")

    patch = transform_product_for_update(product)

    assert patch == {
        "title": "Chair",
        "medusaId": "p1",
        "localizedTitles.en": "Chair",
        "description": "Oak chair",
        "localizedDescriptions.en": "Oak chair",
    }


@pytest.mark.parametrize("description", [None, "", "   "])
def test_update_patch_omits_missing_description(description):
    """No description on the platform must not wipe the one edited in the studio"""
    product = ProductRecord(id="p1", title="Chair", description=description)

    patch = transform_product_for_update(product)

    assert "description" not in patch
    assert "localizedDescriptions.en" not in patch
    assert patch == {"title": "Chair", "medusaId": "p1", "localizedTitles.en": "Chair"}


def test_update_patch_never_touches_store_only_fields():
    product = ProductRecord(id="p1", title="Chair", description="Oak chair", brand="Ignored")

    patch = transform_product_for_update(product)

    top_level_keys = {key.split(".")[0] for key in patch}
    assert not top_level_keys & STORE_ONLY_FIELDS


def test_transforms_are_deterministic():
    product = ProductRecord(id="p1", title="Chair", description="Oak chair")

    assert transform_product_for_create(product) == transform_product_for_create(product)
    assert transform_product_for_update(product) == transform_product_for_update(product)


def test_transform_registry_lookup():
    assert get_create_transformer(SyncDocumentType.PRODUCT) is transform_product_for_create
    assert get_update_transformer("product") is transform_product_for_update


def test_transform_registry_rejects_unknown_types():
    with pytest.raises(ValueError):
        get_create_transformer("collection")
    with pytest.raises(ValueError):
        get_update_transformer("collection")


def test_coerce_record_accepts_platform_payloads(sample_product_data):
    record = coerce_record(SyncDocumentType.PRODUCT, sample_product_data)

    assert isinstance(record, ProductRecord)
    assert record.id == "prod_01"
    assert record.description == "Oak chair"
    assert coerce_record(SyncDocumentType.PRODUCT, record) is record
