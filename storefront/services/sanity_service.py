# storefront/services/sanity_service.py
"""
Mirrors commerce platform records into the Sanity content store.

Identity across the two systems is the shared id: the Sanity document id is
the platform record id, so an upsert is an existence check followed by a
create or a patch. The store is always consulted, nothing is cached locally.

Two concurrent upserts for the same id can both see "absent" and both try to
create; the store rejects the second with DocumentConflictError.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from storefront.core.config import SanityModuleOptions, build_type_map
from storefront.core.enums import SyncDocumentType
from storefront.core.exceptions import ConfigurationError
from storefront.services.sanity.client import SanityClient
from storefront.services.sanity.transformers import (
    coerce_record,
    get_create_transformer,
    get_update_transformer,
)

logger = logging.getLogger(__name__)

SANITY_MODULE = "sanity"


class SanityModuleService:

    def __init__(
        self,
        options: Union[SanityModuleOptions, Mapping[str, Any]],
        client: Optional[SanityClient] = None,
    ):
        self.options = SanityModuleOptions.load(options, SANITY_MODULE)
        self.client = client or SanityClient(
            project_id=self.options.project_id,
            dataset=self.options.dataset.value,
            token=self.options.api_token,
            api_version=self.options.api_version,
        )
        self.studio_url = self.options.studio_url
        self.type_map = build_type_map(self.options.type_map)
        logger.info("Connected to Sanity")

    # ------------------------------------------------------------------
    # Sync operations
    # ------------------------------------------------------------------
    async def upsert_sync_document(self, document_type: SyncDocumentType, record) -> Dict[str, Any]:
        record = coerce_record(document_type, record)
        logger.info(f"Checking if document {record.id} exists in Sanity")
        try:
            existing = await self.client.get_document(record.id)
        except Exception as e:
            logger.error(f"Error in upsert_sync_document for {record.id}: {e}")
            raise

        if existing:
            logger.info(f"Document {record.id} exists, updating")
            return await self.update_sync_document(document_type, record)

        logger.info(f"Document {record.id} does not exist, creating")
        return await self.create_sync_document(document_type, record)

    async def create_sync_document(self, document_type: SyncDocumentType, record, **options) -> Dict[str, Any]:
        """Create the document; ``options`` go to the mutation (visibility, dry_run, tag)."""
        document_type = SyncDocumentType(document_type)
        record = coerce_record(document_type, record)
        logger.info(f"Creating document in Sanity for {document_type.value}: {record.id}")
        try:
            document = get_create_transformer(document_type)(record, self.type_map[document_type])
            logger.debug(f"Document transform result: {json.dumps(document)}")
            result = await self.client.create(document, **options)
        except Exception as e:
            logger.error(f"Error creating document {record.id} in Sanity: {e}")
            raise
        logger.info(f"Successfully created document {record.id} in Sanity")
        return result

    async def update_sync_document(self, document_type: SyncDocumentType, record) -> Dict[str, Any]:
        document_type = SyncDocumentType(document_type)
        record = coerce_record(document_type, record)
        logger.info(f"Updating document in Sanity for {document_type.value}: {record.id}")
        try:
            fields = get_update_transformer(document_type)(record)
            logger.debug(f"Update operations: {json.dumps({'set': fields})}")
            result = await self.client.patch(record.id, set=fields).commit()
        except Exception as e:
            logger.error(f"Error updating document {record.id} in Sanity: {e}")
            raise
        logger.info(f"Successfully updated document {record.id} in Sanity")
        return result

    # ------------------------------------------------------------------
    # Plain document access
    # ------------------------------------------------------------------
    async def retrieve(self, document_id: str) -> Optional[Dict[str, Any]]:
        return await self.client.get_document(document_id)

    async def delete(self, document_id: str) -> Dict[str, Any]:
        logger.info(f"Deleting document {document_id} from Sanity")
        try:
            result = await self.client.delete(document_id)
        except Exception as e:
            logger.error(f"Error deleting document {document_id} from Sanity: {e}")
            raise
        logger.info(f"Successfully deleted document {document_id} from Sanity")
        return result

    async def update(self, document_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Set arbitrary fields on an existing document."""
        logger.info(f"Patching document {document_id} in Sanity")
        try:
            result = await self.client.patch(document_id, set=data).commit()
        except Exception as e:
            logger.error(f"Error patching document {document_id} in Sanity: {e}")
            raise
        logger.info(f"Successfully patched document {document_id} in Sanity")
        return result

    async def list_documents(self, ids: Union[str, Sequence[str]]) -> List[Dict[str, Any]]:
        """Fetch documents by id, each with ``id`` copied from Sanity's ``_id``."""
        document_ids = [ids] if isinstance(ids, str) else list(ids)
        documents = await self.client.get_documents(document_ids)
        return [{"id": doc.get("_id"), **doc} for doc in documents if doc]

    def get_studio_link(self, document_type: str, document_id: str, explicit_type: bool = False) -> str:
        if not self.studio_url:
            raise ConfigurationError("No studio URL provided")
        if explicit_type:
            resolved_type = document_type
        else:
            resolved_type = self.type_map[SyncDocumentType(document_type)]
        return f"{self.studio_url.rstrip('/')}/structure/{resolved_type};{document_id}"
