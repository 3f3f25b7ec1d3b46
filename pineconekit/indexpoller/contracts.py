from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Literal, Optional, Union

from pydantic import BaseModel, Field, PositiveFloat, PositiveInt, model_validator

StatusQuery = Callable[[str], Awaitable[Any]]


class IndexStatus(str, enum.Enum):
    CREATING = "CREATING"
    READY = "READY"
    FAILED = "FAILED"

    @property
    def terminal(self) -> bool:
        return self in (IndexStatus.READY, IndexStatus.FAILED)


# Pinecone controller "state" values mapped onto the terminal statuses.
# Anything else (Initializing, ScalingUp, Terminating, ...) is still pending.
_STATE_ALIASES = {
    "READY": IndexStatus.READY,
    "FAILED": IndexStatus.FAILED,
    "INITIALIZATIONFAILED": IndexStatus.FAILED,
    "CREATING": IndexStatus.CREATING,
    "INITIALIZING": IndexStatus.CREATING,
}


def parse_status(value: Any) -> Union[IndexStatus, str, None]:
    """
    Normalize a status-query result to an IndexStatus.

    Accepts a bare string, an IndexStatus, a mapping with a "status" entry
    (string or {"ready": bool, "state": str}) or an object with a `status`
    attribute. Unknown values are returned as-is (non-terminal).
    """
    if isinstance(value, IndexStatus):
        return value
    if isinstance(value, Mapping):
        if "status" in value:
            return parse_status(value["status"])
        if "state" in value:
            return parse_status(value["state"])
        if value.get("ready") is True:
            return IndexStatus.READY
        return None
    if isinstance(value, str):
        key = value.replace("_", "").replace(" ", "").upper()
        return _STATE_ALIASES.get(key, value)
    status = getattr(value, "status", None)
    if status is not None:
        return parse_status(status)
    return None


class PollPolicy(BaseModel):
    delay_seconds: float = Field(1.0, ge=0, description="Wait after the first pending attempt")
    backoff: Literal["constant", "exponential"] = Field("constant")
    multiplier: float = Field(2.0, ge=1.0, description="Growth factor for exponential backoff")
    max_delay_seconds: PositiveFloat = Field(30.0, description="Upper bound for a single wait")
    max_attempts: PositiveInt = Field(300, description="Hard cap on status queries")
    timeout_seconds: Optional[PositiveFloat] = Field(None, description="Overall wall-clock budget")

    @model_validator(mode="after")
    def _delay_within_cap(self) -> "PollPolicy":
        if self.delay_seconds > self.max_delay_seconds:
            raise ValueError("delay_seconds must not exceed max_delay_seconds")
        return self

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) pending attempt."""
        if self.backoff == "constant":
            return self.delay_seconds
        return min(self.delay_seconds * self.multiplier ** max(0, attempt - 1), self.max_delay_seconds)
