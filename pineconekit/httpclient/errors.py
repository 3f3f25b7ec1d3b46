from __future__ import annotations

from typing import Any, Optional


class HttpRequestError(Exception):
    """Raised for non-2xx responses and transport failures."""

    def __init__(
        self,
        method: str,
        path: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Any = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(f"{method} request to {path} failed: {message}")
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body
        self.cause = cause

    @property
    def not_found(self) -> bool:
        return self.status_code == 404
