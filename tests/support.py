"""Test doubles and builders shared by the ShotSolve test suite."""

import asyncio
import json
import time
from typing import List, Optional

import requests
from PIL import Image

from core.interfaces.capture import CaptureError, ICaptureProvider
from core.interfaces.solution import ISolutionClient
from core.models.shot import RawCapture

TWO_SUM = {
    "problem_statement": "Two Sum",
    "code": "func twoSum(...)",
    "thoughts": ["use a hash map"],
    "time_complexity": "O(n)",
    "space_complexity": "O(n)",
}


def make_image(color=(200, 30, 30), size=(320, 180), mode="RGB") -> Image.Image:
    return Image.new(mode, size, color)


def make_response(status_code: int = 200, body=None) -> requests.Response:
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        body = b""
    elif isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")
    response._content = body
    return response


def envelope(content) -> dict:
    """Chat-completion response wrapping ``content`` as the message text."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class FakeSession:
    """Stands in for requests.Session, recording every POST."""

    def __init__(self, responses: Optional[List] = None):
        self.responses = list(responses or [])
        self.calls: List[dict] = []
        self.closed = False

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


class FakeSolutionClient(ISolutionClient):
    """Client returning scripted outcomes, optionally held behind a gate."""

    def __init__(self, outcomes: Optional[List] = None):
        self.outcomes = list(outcomes or [])
        self.calls: List[tuple] = []
        self.gate: Optional[asyncio.Event] = None

    async def analyze(self, image, language):
        self.calls.append(("analyze", image, language))
        return await self._next()

    async def debug(self, prior_images, new_image, language):
        self.calls.append(("debug", list(prior_images), new_image, language))
        return await self._next()

    async def _next(self):
        # Outcome and gate are bound when the call starts
        outcome = self.outcomes.pop(0)
        gate = self.gate
        if gate is not None:
            await gate.wait()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeCaptureProvider(ICaptureProvider):
    """Capture provider producing synthetic frames."""

    def __init__(self, fail=False):
        self.fail = fail
        self.captures = 0
        self.cleaned_up = False

    def initialize(self, config):
        return True

    def list_monitors(self):
        return [{"id": 1, "x": 0, "y": 0, "width": 320, "height": 180}]

    def capture(self, monitor_id=None):
        self.captures += 1
        if self.fail:
            raise CaptureError("display unavailable")
        image = make_image()
        return RawCapture(
            image=image,
            timestamp=time.time(),
            monitor_id=1,
            width=image.width,
            height=image.height
        )

    def cleanup(self):
        self.cleaned_up = True

    @property
    def name(self):
        return "fake"

    @property
    def supported_platforms(self):
        return ["linux"]
