from __future__ import annotations

import enum
from typing import Any, Dict, Optional


class ErrorCode(str, enum.Enum):
    INDEX_NAME_MISSING = "INDEX_NAME_MISSING"
    INDEX_NOT_FOUND = "INDEX_NOT_FOUND"
    INDEX_CREATION_FAILED = "INDEX_CREATION_FAILED"
    INDEX_CREATION_DATA_MISSING = "INDEX_CREATION_DATA_MISSING"
    INDEX_READY_TIMEOUT = "INDEX_READY_TIMEOUT"
    INDEX_POLL_CANCELLED = "INDEX_POLL_CANCELLED"
    CONFIGURATION_MISSING = "CONFIGURATION_MISSING"
    UNCAUGHT_EXCEPTION = "UNCAUGHT_EXCEPTION"
    UNHANDLED_REJECTION = "UNHANDLED_REJECTION"


class ClientError(RuntimeError):
    """Base typed error for the Pinecone client."""

    code: ErrorCode = ErrorCode.UNCAUGHT_EXCEPTION

    def __init__(
        self,
        message: str,
        *,
        index_name: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.index_name = index_name
        if code is not None:
            self.code = code
        self.cause = cause

    @property
    def not_found(self) -> bool:
        return False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "index_name": self.index_name,
        }


class MissingIdentifier(ClientError):
    """Index name absent where one is required."""

    code = ErrorCode.INDEX_NAME_MISSING

    def __init__(self, message: str = "Index name is missing") -> None:
        super().__init__(message)


class ResourceNotFound(ClientError):
    """The index (or collection) does not exist on the service."""

    code = ErrorCode.INDEX_NOT_FOUND

    def __init__(self, index_name: str, message: Optional[str] = None, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message or f'Index "{index_name}" does not exist', index_name=index_name, cause=cause)

    @property
    def not_found(self) -> bool:
        return True


class CreationFailed(ClientError):
    """The service reported a terminal failure while provisioning the index."""

    code = ErrorCode.INDEX_CREATION_FAILED

    def __init__(self, index_name: str) -> None:
        super().__init__(f'Index "{index_name}" creation failed', index_name=index_name)


class CreationDataMissing(ClientError):
    """Required creation parameters (e.g. dimension) were not supplied."""

    code = ErrorCode.INDEX_CREATION_DATA_MISSING

    def __init__(self, index_name: str, missing: str) -> None:
        super().__init__(f'Index "{index_name}" cannot be created: missing {missing}', index_name=index_name)
        self.missing = missing


class RetryExhausted(ClientError):
    code = ErrorCode.INDEX_READY_TIMEOUT

    def __init__(self, index_name: str, attempts: int, elapsed: float) -> None:
        super().__init__(
            f'Index "{index_name}" not ready after {attempts} attempts ({elapsed:.1f}s)',
            index_name=index_name,
        )
        self.attempts = attempts
        self.elapsed = elapsed


class PollCancelled(ClientError):
    code = ErrorCode.INDEX_POLL_CANCELLED

    def __init__(self, index_name: str, attempts: int) -> None:
        super().__init__(f'Waiting for index "{index_name}" was cancelled', index_name=index_name)
        self.attempts = attempts


class ConfigurationError(ClientError):
    """Settings or environment variables required by the client are missing."""

    code = ErrorCode.CONFIGURATION_MISSING


class UncaughtError(ClientError):
    """Wraps a failure that escaped the application's own handling."""
