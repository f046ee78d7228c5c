"""Conversion of screenshots into the provider's image payload."""

import base64
import io
import logging
from PIL import Image

from core.interfaces.solution import EncodingError

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 70


def ensure_rgb(img: Image.Image) -> Image.Image:
    """Convert an image to RGB for JPEG output.

    Transparent areas are flattened onto white.
    """
    if img.mode == 'RGBA':
        background = Image.new('RGB', img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[3])
        return background
    elif img.mode != 'RGB':
        return img.convert('RGB')
    return img


def compress_to_jpeg(img: Image.Image, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Compress an image to JPEG bytes.

    Args:
        img: PIL Image object to compress
        quality: JPEG quality setting (1-100)

    Returns:
        JPEG-encoded bytes

    Raises:
        EncodingError: If the image cannot be encoded
    """
    if not 1 <= quality <= 100:
        raise EncodingError(f"JPEG quality must be between 1 and 100, got {quality}")

    buffer = io.BytesIO()
    try:
        ensure_rgb(img).save(buffer, format="JPEG", quality=quality)
    except (OSError, ValueError) as e:
        raise EncodingError(f"Image could not be encoded as JPEG: {e}") from e
    return buffer.getvalue()


def encode_image(img: Image.Image, quality: int = DEFAULT_JPEG_QUALITY) -> str:
    """Compress an image and return it as a base64 string.

    Args:
        img: Screenshot to encode
        quality: JPEG quality setting (1-100)

    Returns:
        Base64 text of the JPEG bytes

    Raises:
        EncodingError: If the image cannot be encoded
    """
    jpeg_bytes = compress_to_jpeg(img, quality)
    encoded = base64.b64encode(jpeg_bytes).decode("ascii")
    logger.debug(
        f"Encoded {img.width}x{img.height} image as JPEG "
        f"({len(jpeg_bytes) / 1024:.1f} KB, quality {quality})"
    )
    return encoded


def to_data_uri(encoded: str) -> str:
    """Wrap base64 JPEG text in a data URI."""
    return f"data:image/jpeg;base64,{encoded}"
