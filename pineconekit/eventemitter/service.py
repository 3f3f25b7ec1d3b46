from __future__ import annotations

import enum
import logging
import threading
from typing import Dict, Generic, List, Optional, Set, Type

from .contracts import E, Event, EventFilter, Listener, Metadata

log = logging.getLogger("pineconekit.events")


class EventEmitter(Generic[E]):
    """
    Synchronous pub/sub keyed by event type, with per-type mute and filter chains.

    Filters for a type are each applied to the original event; every filter that
    returns an event (not None) triggers its own round of listener calls, so N
    surviving filters notify every listener N times. Without filters listeners
    are notified once. Events returned by filters are re-validated before
    delivery. An event type given as a raw value is coerced through event_enum
    by every method when one is set. Listener and filter exceptions reach
    the caller of emit().
    """

    def __init__(self, event_enum: Optional[Type[enum.Enum]] = None) -> None:
        self._event_enum = event_enum
        self._listeners: Dict[E, List[Listener]] = {}
        self._filters: Dict[E, List[EventFilter]] = {}
        self._muted: Set[E] = set()
        self._lock = threading.RLock()

    def _coerce(self, event_type: E) -> E:
        if self._event_enum is not None:
            return self._event_enum(event_type)
        return event_type

    # ---------- Registration ----------
    def on(self, event_type: E, listener: Listener) -> None:
        event_type = self._coerce(event_type)
        with self._lock:
            self._listeners.setdefault(event_type, []).append(listener)

    def off(self, event_type: E, listener: Listener) -> None:
        event_type = self._coerce(event_type)
        with self._lock:
            listeners = self._listeners.get(event_type)
            if listeners and listener in listeners:
                listeners.remove(listener)

    def add_event_filter(self, event_type: E, flt: EventFilter) -> None:
        event_type = self._coerce(event_type)
        with self._lock:
            self._filters.setdefault(event_type, []).append(flt)

    def mute(self, event_type: E) -> None:
        event_type = self._coerce(event_type)
        with self._lock:
            self._muted.add(event_type)

    def unmute(self, event_type: E) -> None:
        event_type = self._coerce(event_type)
        with self._lock:
            self._muted.discard(event_type)

    def is_muted(self, event_type: E) -> bool:
        event_type = self._coerce(event_type)
        with self._lock:
            return event_type in self._muted

    def listener_count(self, event_type: E) -> int:
        event_type = self._coerce(event_type)
        with self._lock:
            return len(self._listeners.get(event_type, ()))

    # ---------- Emission ----------
    def emit(self, event_type: E, metadata: Optional[Metadata] = None) -> None:
        event_type = self._coerce(event_type)

        with self._lock:
            if event_type in self._muted:
                return
            filters = list(self._filters.get(event_type, ()))

        event: Event = Event(type=event_type, metadata=dict(metadata or {}))

        if not filters:
            self._notify(event)
            return

        for flt in filters:
            filtered = flt(event)
            if filtered is not None:
                # filters may have edited metadata in place
                filtered.validate()
                self._notify(filtered)

    def _notify(self, event: Event) -> None:
        with self._lock:
            listeners = list(self._listeners.get(event.type, ()))
        log.debug("event.emit type=%s listeners=%d", event.type, len(listeners))
        for listener in listeners:
            listener(event)
