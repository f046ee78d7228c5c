"""On-demand screen capture feeding the screenshot queue."""

import asyncio
import logging
from typing import Callable, Optional

from core.bus.event_bus import EventBus
from core.interfaces.capture import ICaptureProvider, CaptureError
from core.interfaces.events import Event, EventType
from core.models.shot import CapturedShot
from modules.queue.screenshot_queue import ScreenshotQueue

logger = logging.getLogger(__name__)


class CaptureController:
    """Turns capture requests into queued shots.

    The blocking provider call runs in the default executor; the queue is
    only touched back on the event loop. The optional window hooks let a
    UI hide itself so it does not appear in the screenshot.
    """

    def __init__(
        self,
        provider: ICaptureProvider,
        queue: ScreenshotQueue,
        event_bus: Optional[EventBus] = None,
        hide_window: Optional[Callable[[], None]] = None,
        show_window: Optional[Callable[[], None]] = None,
        settle_delay_seconds: float = 0.1
    ):
        """Initialize the capture controller.

        Args:
            provider: Initialized capture provider
            queue: Queue receiving captured images
            event_bus: Bus for capture events (None = no events)
            hide_window: Called before capturing
            show_window: Called after capturing, success or not
            settle_delay_seconds: Pause after hide_window before grabbing
        """
        self._provider = provider
        self._queue = queue
        self._event_bus = event_bus
        self._hide_window = hide_window
        self._show_window = show_window
        self._settle_delay = settle_delay_seconds

        self._capturing = False
        self._capture_count = 0
        self._error_count = 0

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    async def capture(self) -> Optional[CapturedShot]:
        """Capture the screen once and queue the result.

        Returns:
            The queued shot, or None if capture failed or one was already
            in progress
        """
        if self._capturing:
            logger.warning("Capture already in progress")
            return None

        self._capturing = True
        try:
            if self._hide_window:
                self._hide_window()
                await asyncio.sleep(self._settle_delay)

            loop = asyncio.get_running_loop()
            try:
                raw = await loop.run_in_executor(None, self._provider.capture)
            except CaptureError as e:
                self._error_count += 1
                logger.error(f"Screen capture failed: {e}")
                self._publish(EventType.CAPTURE_FAILED, {"error": str(e)})
                return None
            finally:
                if self._show_window:
                    self._show_window()

            shot = self._queue.add(raw.image)
            self._capture_count += 1
            self._publish(EventType.SHOT_CAPTURED, {
                "shot_id": shot.shot_id,
                "width": raw.width,
                "height": raw.height,
                "monitor_id": raw.monitor_id,
            })
            return shot
        finally:
            self._capturing = False

    def get_stats(self) -> dict:
        """Get capture statistics."""
        return {
            "captures_count": self._capture_count,
            "error_count": self._error_count,
            "provider": self._provider.name,
        }

    def cleanup(self) -> None:
        self._provider.cleanup()

    def _publish(self, event_type: EventType, data: dict) -> None:
        if self._event_bus is None:
            return
        self._event_bus.publish(Event(type=event_type, data=data, source="capture_controller"))
