from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from .contracts import CreateIndexRequest


class IndexOperationPort(Protocol):
    async def create_index(self, req: CreateIndexRequest) -> Any: ...

    async def describe_index(self, name: str) -> Dict[str, Any]: ...

    async def configure_index(
        self, name: str, replicas: Optional[int] = None, pod_type: Optional[str] = None
    ) -> Any: ...

    async def delete_index(self, name: str) -> Any: ...

    async def list_indexes(self) -> List[str]: ...

    async def create_collection(self, name: str, source: str) -> Any: ...

    async def describe_collection(self, name: str) -> Dict[str, Any]: ...

    async def delete_collection(self, name: str) -> Any: ...

    async def list_collections(self) -> List[str]: ...


class VectorOperationPort(Protocol):
    index_name: str

    async def upsert(self, vectors: Sequence[Any], namespace: Optional[str] = None) -> Dict[str, Any]: ...

    async def update(
        self,
        id: str,
        values: Optional[List[float]] = None,
        set_metadata: Optional[Dict[str, Any]] = None,
        namespace: Optional[str] = None,
    ) -> Any: ...

    async def delete(
        self,
        ids: Optional[List[str]] = None,
        namespace: Optional[str] = None,
        delete_all: bool = False,
        filter: Optional[Dict[str, Any]] = None,
    ) -> Any: ...

    async def fetch(self, ids: List[str], namespace: Optional[str] = None) -> Dict[str, Any]: ...

    async def query(
        self,
        vector: List[float],
        top_k: int,
        namespace: Optional[str] = None,
        filter: Optional[Dict[str, Any]] = None,
        include_values: bool = False,
        include_metadata: bool = True,
    ) -> Dict[str, Any]: ...
