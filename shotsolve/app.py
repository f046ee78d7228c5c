"""Application context wiring the ShotSolve components together."""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Type

from PIL import Image

from core.auth.credential_manager import CredentialManager
from core.bus.event_bus import EventBus
from core.config.config_loader import ConfigLoader
from core.interfaces.capture import ICaptureProvider
from core.interfaces.solution import ISolutionClient
from core.models.config import ShotSolveConfig
from core.models.shot import CapturedShot
from modules.capture.controller import CaptureController
from modules.capture.providers.mss_provider import MSSCaptureProvider
from modules.queue.screenshot_queue import ScreenshotQueue
from modules.solver.openai_client import OpenAISolutionClient
from modules.solver.request_state import SolutionRequestState

logger = logging.getLogger(__name__)

CAPTURE_PROVIDERS: Dict[str, Type[ICaptureProvider]] = {
    "mss": MSSCaptureProvider,
}


class ShotSolveApp:
    """Owns every long-lived component for one run of the application.

    Components are built once here and handed to each other explicitly.
    Call ``shutdown`` when done.
    """

    def __init__(
        self,
        config: Optional[ShotSolveConfig] = None,
        credentials: Optional[CredentialManager] = None,
        client: Optional[ISolutionClient] = None,
        capture_provider: Optional[ICaptureProvider] = None,
        hide_window: Optional[Callable[[], None]] = None,
        show_window: Optional[Callable[[], None]] = None
    ):
        """Initialize the application.

        Args:
            config: Typed configuration (None = defaults)
            credentials: API key store (None = system keyring)
            client: Solution client (None = OpenAI-style HTTP client)
            capture_provider: Screen capture backend (None = from config)
            hide_window: UI hook run before each capture
            show_window: UI hook run after each capture
        """
        self.config = config or ShotSolveConfig()
        self.event_bus = EventBus()
        self.credentials = credentials or CredentialManager()

        self.queue = ScreenshotQueue(
            max_size=self.config.queue.max_size,
            thumbnail_size=self.config.queue.thumbnail_size,
            event_bus=self.event_bus
        )

        self.client = client or OpenAISolutionClient(
            api_key_provider=self.credentials.get_api_key,
            config=self.config.provider
        )

        self.request_state = SolutionRequestState(
            client=self.client,
            queue=self.queue,
            credentials=self.credentials,
            event_bus=self.event_bus,
            default_language=self.config.solver.default_language
        )

        self._capture_provider = capture_provider
        self._hide_window = hide_window
        self._show_window = show_window
        self._capture_controller: Optional[CaptureController] = None

        logger.info("ShotSolve application initialized")

    @classmethod
    def from_config_file(cls, config_path: Optional[str] = None, **kwargs) -> "ShotSolveApp":
        """Build the application from a YAML config file.

        Args:
            config_path: Config file (None = user config file or defaults)
            **kwargs: Passed through to the constructor

        Returns:
            Configured application
        """
        loader = ConfigLoader()
        return cls(config=ShotSolveConfig.from_dict(loader.load(config_path)), **kwargs)

    @property
    def capture_controller(self) -> CaptureController:
        """Capture controller, created on first use."""
        if self._capture_controller is None:
            provider = self._capture_provider or self._create_capture_provider()
            self._capture_controller = CaptureController(
                provider=provider,
                queue=self.queue,
                event_bus=self.event_bus,
                hide_window=self._hide_window,
                show_window=self._show_window,
                settle_delay_seconds=self.config.capture.settle_delay_seconds
            )
        return self._capture_controller

    @property
    def languages(self) -> List[str]:
        return self.config.solver.languages

    def add_image_file(self, path: str) -> CapturedShot:
        """Load an image file from disk into the queue.

        Args:
            path: Image file path

        Returns:
            The queued shot

        Raises:
            OSError: If the file cannot be read as an image
        """
        with Image.open(Path(path).expanduser()) as img:
            img.load()
            image = img.copy()
        logger.info(f"Loaded {path} ({image.width}x{image.height})")
        return self.queue.add(image)

    def shutdown(self) -> None:
        """Release capture and network resources."""
        if self._capture_controller is not None:
            self._capture_controller.cleanup()
            self._capture_controller = None
        self.client.close()
        logger.info("ShotSolve application shut down")

    def _create_capture_provider(self) -> ICaptureProvider:
        name = self.config.capture.provider
        provider_class = CAPTURE_PROVIDERS.get(name)
        if provider_class is None:
            raise ValueError(
                f"Capture provider '{name}' not found "
                f"(available: {', '.join(CAPTURE_PROVIDERS)})"
            )

        provider = provider_class()
        provider.initialize({"monitor_id": self.config.capture.monitor_id})
        return provider
