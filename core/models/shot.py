"""Data models for captures and queued shots."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Tuple, Union
from PIL import Image
import time
import uuid

DEFAULT_THUMBNAIL_SIZE: Tuple[int, int] = (128, 72)


@dataclass
class RawCapture:
    """Screenshot as returned by a capture provider.

    Attributes:
        image: PIL Image object containing the captured screenshot
        timestamp: Unix timestamp when capture occurred
        monitor_id: Which monitor was captured
        width: Image width in pixels
        height: Image height in pixels
        capture_id: Unique identifier for this capture
        metadata: Additional metadata (provider, monitor geometry, ...)
    """
    image: Image.Image
    timestamp: float
    monitor_id: int
    width: int
    height: int
    capture_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    metadata: Dict[str, Any] = field(default_factory=dict)


def make_thumbnail(
    image: Image.Image,
    size: Tuple[int, int] = DEFAULT_THUMBNAIL_SIZE
) -> Image.Image:
    """Scale an image to exactly ``size`` for queue previews."""
    return image.resize(size, Image.LANCZOS)


@dataclass(frozen=True, eq=False)
class CapturedShot:
    """One queued screenshot and its preview.

    Shots are created by ``ScreenshotQueue.add`` and never change after
    that. The queue owns them; consumers read them through
    ``ScreenshotQueue.snapshot``.

    Attributes:
        image: Full-resolution image
        thumbnail: Fixed-size downscaled copy made at creation
        shot_id: Unique identifier, stable for the shot's lifetime
        captured_at: Unix timestamp of creation
    """
    image: Image.Image
    thumbnail: Image.Image
    shot_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    captured_at: float = field(default_factory=time.time)

    @classmethod
    def from_image(
        cls,
        image: Image.Image,
        thumbnail_size: Tuple[int, int] = DEFAULT_THUMBNAIL_SIZE
    ) -> "CapturedShot":
        """Build a shot, computing its thumbnail once."""
        return cls(image=image, thumbnail=make_thumbnail(image, thumbnail_size))

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def save_png(self, path: Union[str, Path]) -> Path:
        """Write the full-resolution image to disk as PNG.

        Args:
            path: Destination file

        Returns:
            The path written
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(path, format="PNG")
        return path

    def to_dict(self) -> Dict[str, Any]:
        """Describe the shot without pixel data."""
        return {
            "shot_id": self.shot_id,
            "captured_at": self.captured_at,
            "width": self.width,
            "height": self.height,
            "thumbnail_size": list(self.thumbnail.size),
        }
