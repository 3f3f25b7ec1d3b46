from __future__ import annotations

import enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Metric(str, enum.Enum):
    COSINE = "cosine"
    EUCLIDEAN = "euclidean"
    DOTPRODUCT = "dotproduct"


class ClientEventType(str, enum.Enum):
    INIT_RESULT = "init_result"
    INDEX_CREATING = "index_creating"
    INDEX_READY = "index_ready"
    INDEX_FAILED = "index_failed"
    INDEX_DELETED = "index_deleted"


# -------- Request Contracts --------

class CreateIndexRequest(BaseModel):
    name: str = Field(min_length=1)
    dimension: int = Field(gt=0)
    metric: Metric = Metric.COSINE
    pods: Optional[int] = Field(None, ge=1)
    replicas: Optional[int] = Field(None, ge=1)
    pod_type: Optional[str] = None
    metadata_config: Optional[Dict[str, List[str]]] = None
    source_collection: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ConfigureIndexRequest(BaseModel):
    replicas: Optional[int] = Field(None, ge=1)
    pod_type: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class CreateCollectionRequest(BaseModel):
    name: str = Field(min_length=1)
    source: str = Field(min_length=1, description="Index the collection is created from")
