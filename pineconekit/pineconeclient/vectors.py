from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..httpclient import HttpClient

log = logging.getLogger("pineconekit.client.vectors")


def _vector_payload(item: Any) -> Dict[str, Any]:
    # (id, values) or (id, values, metadata) tuples are accepted like dicts
    if isinstance(item, Mapping):
        return dict(item)
    if isinstance(item, (tuple, list)) and 2 <= len(item) <= 3:
        out: Dict[str, Any] = {"id": item[0], "values": list(item[1])}
        if len(item) == 3 and item[2] is not None:
            out["metadata"] = item[2]
        return out
    raise ValueError(f"unsupported vector item: {item!r}")


def _compact(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


class VectorOperation:
    """Data-plane operations bound to a single index."""

    def __init__(self, http: HttpClient, index_name: str) -> None:
        self.http = http
        self.index_name = index_name

    async def upsert(self, vectors: Sequence[Any], namespace: Optional[str] = None) -> Dict[str, Any]:
        items = [_vector_payload(v) for v in vectors]
        log.debug("vectors.upsert index=%s n=%d namespace=%s", self.index_name, len(items), namespace)
        return await self.http.post("/vectors/upsert", _compact({"vectors": items, "namespace": namespace}))

    async def update(
        self,
        id: str,
        values: Optional[List[float]] = None,
        set_metadata: Optional[Dict[str, Any]] = None,
        namespace: Optional[str] = None,
    ) -> Any:
        payload = {"id": id, "values": values, "setMetadata": set_metadata, "namespace": namespace}
        return await self.http.post("/vectors/update", _compact(payload))

    async def delete(
        self,
        ids: Optional[List[str]] = None,
        namespace: Optional[str] = None,
        delete_all: bool = False,
        filter: Optional[Dict[str, Any]] = None,
    ) -> Any:
        payload = {"ids": ids, "namespace": namespace, "filter": filter}
        if delete_all:
            payload["deleteAll"] = True
        return await self.http.post("/vectors/delete", _compact(payload))

    async def fetch(self, ids: List[str], namespace: Optional[str] = None) -> Dict[str, Any]:
        params: List[tuple] = [("ids", i) for i in ids]
        if namespace is not None:
            params.append(("namespace", namespace))
        return await self.http.get("/vectors/fetch", params=params)

    async def query(
        self,
        vector: List[float],
        top_k: int,
        namespace: Optional[str] = None,
        filter: Optional[Dict[str, Any]] = None,
        include_values: bool = False,
        include_metadata: bool = True,
    ) -> Dict[str, Any]:
        if top_k < 1:
            raise ValueError("top_k must be >= 1")
        payload = {
            "vector": list(vector),
            "topK": top_k,
            "namespace": namespace,
            "filter": filter,
            "includeValues": include_values,
            "includeMetadata": include_metadata,
        }
        return await self.http.post("/query", _compact(payload))

    async def describe_index_stats(self, filter: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.http.post("/describe_index_stats", _compact({"filter": filter}))
