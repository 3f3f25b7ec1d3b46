"""
IndexPoller package export surface.
"""

from .contracts import IndexStatus, PollPolicy, StatusQuery, parse_status
from .service import IndexReadinessPoller

__all__ = [
    "IndexReadinessPoller",
    "IndexStatus",
    "PollPolicy",
    "StatusQuery",
    "parse_status",
]
