from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

DEFAULT_TIMEOUT_SECONDS = 1800.0  # 30 minutes


@dataclass
class HttpClientSettings:
    base_url: str = ""
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    headers: Dict[str, str] = field(default_factory=dict)
    rest_json: bool = True  # adds Content-Type: application/json
