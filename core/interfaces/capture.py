"""Interface for screen capture sources."""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict
from core.models.shot import RawCapture


class CaptureError(Exception):
    """Raised when a screenshot cannot be taken."""
    pass


class ICaptureProvider(ABC):
    """Source of full-screen screenshots.

    A provider produces one full-screen image per ``capture`` call or
    raises ``CaptureError``. Calls block; the capture controller runs
    them off the event loop.
    """

    @abstractmethod
    def initialize(self, config: dict) -> bool:
        """Prepare the provider.

        Args:
            config: Provider settings, e.g. ``{"monitor_id": 1}``

        Returns:
            True when the provider is ready
        """
        pass

    @abstractmethod
    def list_monitors(self) -> List[Dict]:
        """Physical monitors as dicts with id, x, y, width and height."""
        pass

    @abstractmethod
    def capture(self, monitor_id: Optional[int] = None) -> RawCapture:
        """Take one screenshot.

        Args:
            monitor_id: Monitor to grab (None = the configured one)

        Returns:
            The captured frame with its metadata

        Raises:
            CaptureError: If the screen cannot be read
        """
        pass

    @abstractmethod
    def cleanup(self) -> None:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in config files, e.g. ``mss``."""
        pass

    @property
    @abstractmethod
    def supported_platforms(self) -> List[str]:
        """``sys.platform`` values the provider works on."""
        pass
