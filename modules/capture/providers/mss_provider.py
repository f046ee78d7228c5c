"""MSS-based screen capture provider."""

import logging
import time
import threading
from typing import Optional, List, Dict
from PIL import Image
import mss
from mss.exception import ScreenShotError

from core.interfaces.capture import ICaptureProvider, CaptureError
from core.models.shot import RawCapture

logger = logging.getLogger(__name__)


class MSSCaptureProvider(ICaptureProvider):
    """Full-screen capture through the MSS library.

    MSS handles are bound to the thread that created them, and captures
    run on executor threads, so each thread gets its own handle.
    """

    def __init__(self):
        self._thread_local = threading.local()
        self._handles: List = []
        self._handles_lock = threading.Lock()
        self._monitor_id = 1
        self._initialized = False

    def initialize(self, config: dict) -> bool:
        """Initialize the provider.

        Args:
            config: Dictionary containing:
                - monitor_id: int, monitor to capture (1 = primary)

        Returns:
            True if initialization successful
        """
        self._monitor_id = int(config.get("monitor_id", 1))
        self._initialized = True
        logger.info(f"MSS capture provider initialized (monitor {self._monitor_id})")
        return True

    def _get_sct(self):
        """Return this thread's MSS handle, creating it on first use.

        Raises:
            CaptureError: If provider not initialized or MSS creation fails
        """
        if not self._initialized:
            raise CaptureError("Provider not initialized")

        sct = getattr(self._thread_local, "sct", None)
        if sct is None:
            try:
                sct = mss.mss()
            except ScreenShotError as e:
                raise CaptureError(f"Failed to create MSS instance: {e}") from e
            self._thread_local.sct = sct
            with self._handles_lock:
                self._handles.append(sct)
            logger.debug(f"Created MSS instance for thread {threading.current_thread().name}")

        return sct

    def list_monitors(self) -> List[Dict]:
        """List physical monitors (MSS entry 0, the virtual union, is skipped)."""
        sct = self._get_sct()
        return [
            {
                "id": i,
                "x": monitor["left"],
                "y": monitor["top"],
                "width": monitor["width"],
                "height": monitor["height"],
            }
            for i, monitor in enumerate(sct.monitors[1:], start=1)
        ]

    def capture(self, monitor_id: Optional[int] = None) -> RawCapture:
        """Grab one full-resolution frame of a monitor.

        Args:
            monitor_id: Monitor to capture (None = configured monitor)

        Returns:
            RawCapture with an RGB image

        Raises:
            CaptureError: If capture fails
        """
        sct = self._get_sct()

        if monitor_id is None:
            monitor_id = self._monitor_id

        if monitor_id < 1 or monitor_id >= len(sct.monitors):
            raise CaptureError(f"Invalid monitor_id: {monitor_id}")

        timestamp = time.time()
        monitor = sct.monitors[monitor_id]
        try:
            sct_img = sct.grab(monitor)
        except ScreenShotError as e:
            raise CaptureError(f"Failed to capture screen: {e}") from e

        image = Image.frombytes("RGB", sct_img.size, sct_img.rgb)

        logger.debug(f"Captured {image.width}x{image.height} from monitor {monitor_id}")
        return RawCapture(
            image=image,
            timestamp=timestamp,
            monitor_id=monitor_id,
            width=image.width,
            height=image.height,
            metadata={"provider": self.name, "monitor": dict(monitor)},
        )

    def cleanup(self) -> None:
        """Close every MSS handle this provider opened."""
        with self._handles_lock:
            handles, self._handles = self._handles, []
        for sct in handles:
            sct.close()
        self._thread_local = threading.local()
        self._initialized = False
        logger.debug(f"Closed {len(handles)} MSS handle(s)")

    @property
    def name(self) -> str:
        return "mss"

    @property
    def supported_platforms(self) -> List[str]:
        return ["linux", "darwin", "win32"]
