from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..errors import ResourceNotFound
from ..httpclient import HttpClient, HttpRequestError
from .contracts import ConfigureIndexRequest, CreateCollectionRequest, CreateIndexRequest

log = logging.getLogger("pineconekit.client.api")


class PineconeApi:
    """
    Control-plane wrapper (index and collection management) over HttpClient.
    Response bodies are returned as the service sends them.
    """

    def __init__(self, http: HttpClient) -> None:
        self.http = http

    # -------- Indexes --------

    async def create_index(self, req: CreateIndexRequest) -> Any:
        log.info("api.create_index name=%s dimension=%s metric=%s", req.name, req.dimension, req.metric.value)
        return await self.http.post("/databases", req.to_payload())

    async def describe_index(self, name: str) -> Dict[str, Any]:
        try:
            return await self.http.get(f"/databases/{name}")
        except HttpRequestError as e:
            if e.not_found:
                raise ResourceNotFound(name, cause=e) from e
            raise

    async def configure_index(
        self, name: str, replicas: Optional[int] = None, pod_type: Optional[str] = None
    ) -> Any:
        patch = ConfigureIndexRequest(replicas=replicas, pod_type=pod_type)
        return await self.http.patch(f"/databases/{name}", patch.to_payload())

    async def delete_index(self, name: str) -> Any:
        try:
            return await self.http.delete(f"/databases/{name}")
        except HttpRequestError as e:
            if e.not_found:
                raise ResourceNotFound(name, cause=e) from e
            raise

    async def list_indexes(self) -> List[str]:
        return list(await self.http.get("/databases") or [])

    # -------- Collections --------

    async def create_collection(self, name: str, source: str) -> Any:
        req = CreateCollectionRequest(name=name, source=source)
        return await self.http.post("/collections", req.model_dump())

    async def describe_collection(self, name: str) -> Dict[str, Any]:
        try:
            return await self.http.get(f"/collections/{name}")
        except HttpRequestError as e:
            if e.not_found:
                raise ResourceNotFound(name, f'Collection "{name}" does not exist', cause=e) from e
            raise

    async def delete_collection(self, name: str) -> Any:
        return await self.http.delete(f"/collections/{name}")

    async def list_collections(self) -> List[str]:
        return list(await self.http.get("/collections") or [])

    # -------- Project --------

    async def whoami(self) -> Dict[str, Any]:
        return await self.http.get("/actions/whoami")
