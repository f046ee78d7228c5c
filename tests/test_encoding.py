"""Tests for screenshot encoding."""

import base64
import io

import pytest
from PIL import Image

from support import make_image
from core.interfaces.solution import EncodingError
from modules.solver.encoding import compress_to_jpeg, encode_image, ensure_rgb, to_data_uri


def test_encode_image_produces_base64_jpeg():
    encoded = encode_image(make_image(size=(64, 48)))

    decoded = Image.open(io.BytesIO(base64.b64decode(encoded)))
    assert decoded.format == "JPEG"
    assert decoded.size == (64, 48)


def test_rgba_flattened_onto_white():
    transparent = Image.new("RGBA", (10, 10), (0, 0, 0, 0))

    flattened = ensure_rgb(transparent)

    assert flattened.mode == "RGB"
    assert flattened.getpixel((5, 5)) == (255, 255, 255)


def test_non_rgb_modes_converted():
    assert ensure_rgb(Image.new("L", (4, 4), 128)).mode == "RGB"


def test_lower_quality_gives_smaller_output():
    img = Image.effect_noise((256, 256), 64).convert("RGB")

    assert len(compress_to_jpeg(img, quality=20)) < len(compress_to_jpeg(img, quality=95))


@pytest.mark.parametrize("quality", [0, 101])
def test_invalid_quality_rejected(quality):
    with pytest.raises(EncodingError):
        compress_to_jpeg(make_image(), quality=quality)


def test_data_uri_prefix():
    assert to_data_uri("abc") == "data:image/jpeg;base64,abc"
