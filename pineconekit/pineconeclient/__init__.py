"""
PineconeClient package export surface.
"""

from .api import PineconeApi
from .config import PineconeSettings
from .contracts import (
    ClientEventType,
    ConfigureIndexRequest,
    CreateCollectionRequest,
    CreateIndexRequest,
    Metric,
)
from .ports import IndexOperationPort, VectorOperationPort
from .service import PineconeClient
from .vectors import VectorOperation

__all__ = [
    "ClientEventType",
    "ConfigureIndexRequest",
    "CreateCollectionRequest",
    "CreateIndexRequest",
    "IndexOperationPort",
    "Metric",
    "PineconeApi",
    "PineconeClient",
    "PineconeSettings",
    "VectorOperation",
    "VectorOperationPort",
]
