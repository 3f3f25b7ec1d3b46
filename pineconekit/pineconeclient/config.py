from __future__ import annotations
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Literal, Optional

from ..indexpoller import PollPolicy

class PineconeSettings(BaseSettings):
    # Auth / location
    PINECONE_KEY: Optional[str] = None
    PINECONE_ENV: Optional[str] = None       # e.g. "us-west4-gcp-free"
    PINECONE_PROJECT: Optional[str] = None   # resolved via whoami when unset
    PINECONE_CONTROLLER_URL: Optional[str] = None
    PINECONE_TIMEOUT_SECONDS: float = Field(default=1800.0, gt=0)
    # Index defaults
    PINECONE_INDEX: str = Field(default="")
    PINECONE_DEF_DIM: Optional[int] = Field(default=1536, gt=0)
    PINECONE_DEF_METRIC: Literal["cosine", "euclidean", "dotproduct"] = "cosine"
    # Readiness polling
    PINECONE_POLL_DELAY_SECONDS: float = Field(default=1.0, ge=0)
    PINECONE_POLL_BACKOFF: Literal["constant", "exponential"] = "constant"
    PINECONE_POLL_MAX_DELAY_SECONDS: float = Field(default=30.0, gt=0)
    PINECONE_POLL_MAX_ATTEMPTS: int = Field(default=300, gt=0)
    PINECONE_POLL_TIMEOUT_SECONDS: Optional[float] = None

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    def controller_url(self) -> str:
        if self.PINECONE_CONTROLLER_URL:
            return self.PINECONE_CONTROLLER_URL.rstrip("/")
        return f"https://controller.{self.PINECONE_ENV}.pinecone.io"

    def index_url(self, index_name: str, project: str) -> str:
        return f"https://{index_name}-{project}.svc.{self.PINECONE_ENV}.pinecone.io"

    def auth_headers(self) -> dict:
        return {"Api-Key": self.PINECONE_KEY or "", "Accept": "application/json"}

    def poll_policy(self) -> PollPolicy:
        return PollPolicy(
            delay_seconds=self.PINECONE_POLL_DELAY_SECONDS,
            backoff=self.PINECONE_POLL_BACKOFF,
            max_delay_seconds=max(self.PINECONE_POLL_MAX_DELAY_SECONDS, self.PINECONE_POLL_DELAY_SECONDS),
            max_attempts=self.PINECONE_POLL_MAX_ATTEMPTS,
            timeout_seconds=self.PINECONE_POLL_TIMEOUT_SECONDS,
        )
