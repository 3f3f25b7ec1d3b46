from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar, Union

Primitive = Union[str, int, float, bool, None]
Metadata = Dict[str, Primitive]

E = TypeVar("E", bound=Hashable)

_PRIMITIVE_TYPES = (str, int, float, bool, type(None))


@dataclass
class Event(Generic[E]):
    """
    A single emission: event type + flat metadata.
    Metadata values must be primitives so the event stays serializable.
    """
    type: E
    metadata: Metadata = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for key, value in self.metadata.items():
            if not isinstance(key, str):
                raise ValueError(f"metadata key {key!r} is not a string")
            if not isinstance(value, _PRIMITIVE_TYPES):
                raise ValueError(f"metadata[{key!r}] is not a primitive: {type(value).__name__}")

    def to_dict(self) -> Dict[str, object]:
        event_type = getattr(self.type, "value", self.type)
        return {"type": event_type, "metadata": dict(self.metadata)}


Listener = Callable[[Event], None]
EventFilter = Callable[[Event], Optional[Event]]
