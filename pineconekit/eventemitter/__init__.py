"""
EventEmitter package export surface.
"""

from .contracts import Event, EventFilter, Listener, Metadata, Primitive
from .service import EventEmitter

__all__ = [
    "Event",
    "EventEmitter",
    "EventFilter",
    "Listener",
    "Metadata",
    "Primitive",
]
