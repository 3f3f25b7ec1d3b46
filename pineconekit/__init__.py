"""
pineconekit: async client for the Pinecone vector-database HTTP API.
"""

__version__ = "0.1.0"

from .errors import (
    ClientError,
    ConfigurationError,
    CreationDataMissing,
    CreationFailed,
    ErrorCode,
    MissingIdentifier,
    PollCancelled,
    ResourceNotFound,
    RetryExhausted,
    UncaughtError,
)
from .eventemitter import Event, EventEmitter
from .indexpoller import IndexReadinessPoller, IndexStatus, PollPolicy
from .pineconeclient import ClientEventType, Metric, PineconeClient, PineconeSettings

__all__ = [
    "ClientError",
    "ClientEventType",
    "ConfigurationError",
    "CreationDataMissing",
    "CreationFailed",
    "ErrorCode",
    "Event",
    "EventEmitter",
    "IndexReadinessPoller",
    "IndexStatus",
    "Metric",
    "MissingIdentifier",
    "PineconeClient",
    "PineconeSettings",
    "PollCancelled",
    "PollPolicy",
    "ResourceNotFound",
    "RetryExhausted",
    "UncaughtError",
]
