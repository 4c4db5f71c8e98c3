import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from storefront.core.exceptions import DocumentConflictError, DocumentNotFoundError, SanityAPIError

logger = logging.getLogger(__name__)


class SanityClient:
    """
    Asynchronous client for the Sanity HTTP API (documents + mutations).

    Only the document CRUD surface the sync service needs is covered:
        - get_document / get_documents  -> GET  /data/doc/{dataset}/{ids}
        - create / patch(...).commit() / delete -> POST /data/mutate/{dataset}

    Errors are raised as SanityAPIError subclasses, 404 becomes
    DocumentNotFoundError and 409 becomes DocumentConflictError.

    Documentation: https://www.sanity.io/docs/http-api
    """

    API_HOST = "api.sanity.io"

    def __init__(
        self,
        project_id: str,
        dataset: str,
        token: str,
        api_version: str,
        timeout: float = 30.0,
    ):
        self.project_id = project_id
        self.dataset = dataset
        self.token = token
        self.api_version = api_version.lstrip("v")
        self.timeout = timeout
        self.BASE_URL = f"https://{project_id}.{self.API_HOST}/v{self.api_version}"
        logger.info(f"Initializing SanityClient for project {project_id} (dataset: {dataset})")

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
    ) -> Dict:
        """
        Make a request to the Sanity API

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint (without base URL)
            data: JSON body for POST requests
            params: Query parameters

        Returns:
            Dict: Response data

        Raises:
            SanityAPIError: If the request fails or the API returns an error
        """
        url = f"{self.BASE_URL}/{endpoint.lstrip('/')}"

        logger.debug(f"Making {method} request to {url}")
        if params:
            logger.debug(f"Params: {params}")
        if data:
            logger.debug(f"Data: {json.dumps(data)[:500]}...")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._get_headers(),
                    json=data,
                    params=params,
                )
        except httpx.TimeoutException as e:
            logger.error(f"Sanity timeout error: {str(e)}")
            raise SanityAPIError(f"Request timed out: {str(e)}")
        except httpx.RequestError as e:
            logger.error(f"Sanity network error: {str(e)}")
            raise SanityAPIError(f"Network error: {str(e)}")

        if response.status_code not in (200, 201, 202, 204):
            logger.error(f"Sanity API error ({response.status_code}): {response.text}")
            raise self._classify_error(response.status_code, response.text)

        if response.status_code == 204:
            return {}

        return response.json()

    @staticmethod
    def _classify_error(status_code: int, body: str) -> SanityAPIError:
        message = f"Request failed ({status_code}): {body}"
        context = {"status_code": status_code}
        lowered = body.lower()
        if status_code == 404 or "notfound" in lowered:
            return DocumentNotFoundError(message, context)
        if status_code == 409 or "alreadyexists" in lowered:
            return DocumentConflictError(message, context)
        return SanityAPIError(message, context)

    # Document reads

    async def get_document(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a single document by id, None when the store does not have it."""
        response = await self._make_request("GET", f"/data/doc/{self.dataset}/{document_id}")
        documents = response.get("documents") or []
        return documents[0] if documents else None

    async def get_documents(self, document_ids: Sequence[str]) -> List[Optional[Dict[str, Any]]]:
        """Fetch several documents; the result follows ``document_ids`` order, None for gaps."""
        if not document_ids:
            return []
        joined = ",".join(document_ids)
        response = await self._make_request("GET", f"/data/doc/{self.dataset}/{joined}")
        by_id = {doc["_id"]: doc for doc in response.get("documents") or [] if doc}
        return [by_id.get(document_id) for document_id in document_ids]

    # Mutations

    async def mutate(
        self,
        mutations: List[Dict[str, Any]],
        visibility: str = "sync",
        dry_run: bool = False,
        tag: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = {
            "returnIds": "true",
            "returnDocuments": "true",
            "visibility": visibility,
        }
        if dry_run:
            params["dryRun"] = "true"
        if tag:
            params["tag"] = tag
        return await self._make_request(
            "POST", f"/data/mutate/{self.dataset}", data={"mutations": mutations}, params=params
        )

    async def create(self, document: Dict[str, Any], **options) -> Dict[str, Any]:
        """Create a document; fails with DocumentConflictError when the id is taken."""
        response = await self.mutate([{"create": document}], **options)
        return self._first_document(response, document.get("_id"))

    def patch(
        self,
        document_id: str,
        set: Optional[Dict[str, Any]] = None,
        unset: Optional[Sequence[str]] = None,
    ) -> "Patch":
        return Patch(self, document_id, set=set, unset=unset)

    async def delete(self, document_id: str) -> Dict[str, Any]:
        response = await self.mutate([{"delete": {"id": document_id}}])
        results = response.get("results") or []
        if not results:
            raise DocumentNotFoundError(
                f"Document {document_id} not found", {"document_id": document_id}
            )
        return results[0]

    @staticmethod
    def _first_document(response: Dict[str, Any], document_id: Optional[str]) -> Dict[str, Any]:
        results = response.get("results") or []
        if not results:
            raise SanityAPIError(
                f"Mutation for {document_id} returned no results", {"document_id": document_id}
            )
        first = results[0]
        return first.get("document") or {"_id": first.get("id")}


class Patch:
    """Builder for a patch mutation, sent when ``commit`` is awaited."""

    def __init__(self, client: SanityClient, document_id: str, set=None, unset=None):
        self._client = client
        self.document_id = document_id
        self.operations: Dict[str, Any] = {}
        if set:
            self.set(set)
        if unset:
            self.unset(unset)

    def set(self, fields: Dict[str, Any]) -> "Patch":
        self.operations.setdefault("set", {}).update(fields)
        return self

    def unset(self, paths: Sequence[str]) -> "Patch":
        self.operations.setdefault("unset", []).extend(paths)
        return self

    def serialize(self) -> Dict[str, Any]:
        return {"patch": {"id": self.document_id, **self.operations}}

    async def commit(self, **options) -> Dict[str, Any]:
        response = await self._client.mutate([self.serialize()], **options)
        return self._client._first_document(response, self.document_id)
