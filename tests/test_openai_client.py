"""Tests for the chat-completion solution client."""

import base64
import io

import pytest
import requests
from PIL import Image

from support import TWO_SUM, FakeSession, envelope, make_image, make_response
from core.interfaces.solution import (
    EncodingError,
    HttpStatusError,
    InvalidInputError,
    MissingCredentialError,
    ParseError,
    ProviderError,
    TransportError,
)
from core.models.config import ProviderConfig
from modules.solver.openai_client import OpenAISolutionClient


def make_client(session, api_key="sk-test", **config):
    return OpenAISolutionClient(
        api_key_provider=lambda: api_key,
        config=ProviderConfig(**config),
        session=session
    )


def sent_images(call):
    """Decode every image in a recorded request, in order."""
    images = []
    for message in call["json"]["messages"]:
        if isinstance(message["content"], str):
            continue
        for part in message["content"]:
            if part["type"] == "image_url":
                data = part["image_url"]["url"].split(",", 1)[1]
                images.append(Image.open(io.BytesIO(base64.b64decode(data))).convert("RGB"))
    return images


def dominant_color(img):
    return img.resize((1, 1)).getpixel((0, 0))


@pytest.mark.asyncio
async def test_analyze_sends_expected_request():
    session = FakeSession([make_response(200, envelope(TWO_SUM))])
    client = make_client(session, timeout_seconds=30)

    result = await client.analyze(make_image(), "go")

    assert result.problem_statement == "Two Sum"
    assert len(session.calls) == 1
    call = session.calls[0]
    assert call["url"] == "https://api.openai.com/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer sk-test"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["timeout"] == 30
    assert call["json"]["model"] == "gpt-4o"
    assert call["json"]["max_tokens"] == 4000
    assert call["json"]["response_format"] == {"type": "json_object"}
    assert len(sent_images(call)) == 1


@pytest.mark.asyncio
async def test_missing_key_fails_without_network_call():
    session = FakeSession()
    client = make_client(session, api_key=None)

    with pytest.raises(MissingCredentialError):
        await client.analyze(make_image(), "python")
    with pytest.raises(MissingCredentialError):
        await client.debug([make_image()], make_image(), "python")

    assert session.calls == []


@pytest.mark.asyncio
async def test_blank_key_counts_as_missing():
    session = FakeSession()
    client = make_client(session, api_key="   ")

    with pytest.raises(MissingCredentialError):
        await client.analyze(make_image(), "python")
    assert session.calls == []


@pytest.mark.asyncio
async def test_debug_sends_priors_then_new_image():
    session = FakeSession([make_response(200, envelope({"new_code": "fixed()"}))])
    client = make_client(session)
    red, green, blue = make_image((255, 0, 0)), make_image((0, 255, 0)), make_image((0, 0, 255))

    result = await client.debug([red, green], blue, "python")

    assert result.revised_code == "fixed()"
    colors = [dominant_color(img) for img in sent_images(session.calls[0])]
    assert len(colors) == 3
    assert colors[0][0] > 200 and colors[1][1] > 200 and colors[2][2] > 200


@pytest.mark.asyncio
async def test_debug_without_priors_builds_no_request():
    session = FakeSession()
    client = make_client(session)

    with pytest.raises(InvalidInputError):
        await client.debug([], make_image(), "python")
    assert session.calls == []


@pytest.mark.asyncio
async def test_provider_message_surfaces_on_error_status():
    body = {"error": {"message": "invalid api key"}}
    client = make_client(FakeSession([make_response(401, body)]))

    with pytest.raises(ProviderError) as excinfo:
        await client.analyze(make_image(), "python")

    assert excinfo.value.message == "invalid api key"


@pytest.mark.asyncio
async def test_error_status_without_message_reports_code():
    client = make_client(FakeSession([make_response(502, "<html>bad gateway</html>")]))

    with pytest.raises(HttpStatusError) as excinfo:
        await client.analyze(make_image(), "python")

    assert excinfo.value.status_code == 502


@pytest.mark.asyncio
async def test_network_failure_becomes_transport_error():
    client = make_client(FakeSession([requests.ConnectionError("connection refused")]))

    with pytest.raises(TransportError):
        await client.analyze(make_image(), "python")


@pytest.mark.asyncio
async def test_unparseable_success_body_is_parse_error():
    client = make_client(FakeSession([make_response(200, "not json")]))

    with pytest.raises(ParseError):
        await client.analyze(make_image(), "python")


@pytest.mark.asyncio
async def test_api_key_read_on_every_call():
    keys = iter(["sk-one", "sk-two"])
    session = FakeSession([make_response(200, TWO_SUM), make_response(200, TWO_SUM)])
    client = OpenAISolutionClient(api_key_provider=lambda: next(keys), session=session)

    await client.analyze(make_image(), "python")
    await client.analyze(make_image(), "python")

    assert [c["headers"]["Authorization"] for c in session.calls] == ["Bearer sk-one", "Bearer sk-two"]


def test_close_closes_session():
    session = FakeSession()
    make_client(session).close()
    assert session.closed


@pytest.mark.asyncio
async def test_encoding_failure_sends_nothing():
    session = FakeSession()
    client = make_client(session, jpeg_quality=0)

    with pytest.raises(EncodingError):
        await client.analyze(make_image(), "python")
    with pytest.raises(EncodingError):
        await client.debug([make_image()], make_image(), "python")

    assert session.calls == []
