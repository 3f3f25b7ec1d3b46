"""
HttpClient package export surface.
"""

from .client import HttpClient
from .config import DEFAULT_TIMEOUT_SECONDS, HttpClientSettings
from .errors import HttpRequestError

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "HttpClient",
    "HttpClientSettings",
    "HttpRequestError",
]
