"""Bounded FIFO queue of captured screenshots."""

import logging
from typing import List, Optional, Tuple
from PIL import Image

from core.bus.event_bus import EventBus
from core.interfaces.events import Event, EventType
from core.models.shot import CapturedShot, DEFAULT_THUMBNAIL_SIZE

logger = logging.getLogger(__name__)


class ScreenshotQueue:
    """Ordered, capacity-bounded collection of shots.

    Insertion order is chronological order. Adding to a full queue evicts
    the oldest shot first, so the queue never holds more than ``max_size``
    shots. Every mutation publishes a QUEUE_CHANGED event.

    All mutation is expected to happen on one owner thread (the event
    loop); the queue does no locking of its own.
    """

    def __init__(
        self,
        max_size: int = 5,
        thumbnail_size: Tuple[int, int] = DEFAULT_THUMBNAIL_SIZE,
        event_bus: Optional[EventBus] = None
    ):
        """Initialize the queue.

        Args:
            max_size: Maximum number of shots kept
            thumbnail_size: (width, height) of generated thumbnails
            event_bus: Bus for change notifications (None = no notifications)

        Raises:
            ValueError: If max_size is less than 1
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")

        self._items: List[CapturedShot] = []
        self._max_size = max_size
        self._thumbnail_size = thumbnail_size
        self._event_bus = event_bus

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        return len(self._items)

    def is_full(self) -> bool:
        return len(self._items) >= self._max_size

    def add(self, image: Image.Image) -> CapturedShot:
        """Wrap an image in a new shot and append it.

        Args:
            image: Full-resolution screenshot

        Returns:
            The newly created shot
        """
        shot = CapturedShot.from_image(image, self._thumbnail_size)

        if self.is_full():
            evicted = self._items.pop(0)
            logger.info(f"Queue full, evicted oldest shot {evicted.shot_id}")
            self._notify("evicted", evicted.shot_id)

        self._items.append(shot)
        logger.info(
            f"Added shot {shot.shot_id} ({shot.width}x{shot.height}), "
            f"queue size {len(self._items)}/{self._max_size}"
        )
        self._notify("added", shot.shot_id)
        return shot

    def remove_at(self, index: int) -> bool:
        """Remove the shot at ``index``.

        Out-of-range indices, negative ones included, leave the queue
        untouched.

        Args:
            index: Position in the queue (0 = oldest)

        Returns:
            True if a shot was removed
        """
        if index < 0 or index >= len(self._items):
            logger.debug(f"Ignoring remove_at({index}) on queue of size {len(self._items)}")
            return False

        shot = self._items.pop(index)
        logger.info(f"Removed shot {shot.shot_id} at index {index}")
        self._notify("removed", shot.shot_id)
        return True

    def clear(self) -> None:
        """Remove every shot."""
        if not self._items:
            return

        count = len(self._items)
        self._items.clear()
        logger.info(f"Cleared {count} shot(s) from queue")
        self._notify("cleared")

    def snapshot(self) -> Tuple[CapturedShot, ...]:
        """Read-only view of the current shots, oldest first."""
        return tuple(self._items)

    def images(self) -> List[Image.Image]:
        """Full-resolution images of the current shots, oldest first."""
        return [shot.image for shot in self._items]

    def _notify(self, action: str, shot_id: Optional[str] = None) -> None:
        if self._event_bus is None:
            return

        self._event_bus.publish(Event(
            type=EventType.QUEUE_CHANGED,
            data={
                "action": action,
                "shot_id": shot_id,
                "size": len(self._items),
            },
            source="screenshot_queue"
        ))
