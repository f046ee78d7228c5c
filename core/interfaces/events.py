"""Events published on the ShotSolve event bus."""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict
import time


class EventType(Enum):
    """Kinds of change a front end can listen for.

    SHOT_CAPTURED: data = shot_id, width, height, monitor_id
    CAPTURE_FAILED: data = error
    QUEUE_CHANGED: data = action (added/evicted/removed/cleared), shot_id, size
    REQUEST_STATE_CHANGED: data = state (RequestSnapshot)
    """
    SHOT_CAPTURED = "shot.captured"
    CAPTURE_FAILED = "capture.failed"
    QUEUE_CHANGED = "queue.changed"
    REQUEST_STATE_CHANGED = "request.state_changed"


@dataclass
class Event:
    """One published change.

    Attributes:
        type: Kind of change
        data: Payload, keys depend on ``type``
        timestamp: Unix time of creation (filled in when omitted)
        source: Name of the publishing component
    """
    type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = None
    source: str = "unknown"

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = time.time()
