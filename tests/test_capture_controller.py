"""Tests for the capture controller."""

import pytest

from support import FakeCaptureProvider
from core.interfaces.events import EventType
from modules.capture.controller import CaptureController


@pytest.mark.asyncio
async def test_capture_adds_shot_to_queue(queue, event_bus):
    calls = []
    controller = CaptureController(
        FakeCaptureProvider(), queue, event_bus,
        hide_window=lambda: calls.append("hide"),
        show_window=lambda: calls.append("show"),
        settle_delay_seconds=0
    )

    shot = await controller.capture()

    assert queue.snapshot() == (shot,)
    assert calls == ["hide", "show"]
    captured = event_bus.get_history(EventType.SHOT_CAPTURED)
    assert captured[0].data["shot_id"] == shot.shot_id
    assert controller.get_stats() == {"captures_count": 1, "error_count": 0, "provider": "fake"}


@pytest.mark.asyncio
async def test_failed_capture_leaves_queue_alone(queue, event_bus):
    calls = []
    controller = CaptureController(
        FakeCaptureProvider(fail=True), queue, event_bus,
        show_window=lambda: calls.append("show"),
        settle_delay_seconds=0
    )

    assert await controller.capture() is None

    assert len(queue) == 0
    assert calls == ["show"]
    failed = event_bus.get_history(EventType.CAPTURE_FAILED)
    assert "display unavailable" in failed[0].data["error"]
    assert controller.get_stats()["error_count"] == 1
    assert controller.is_capturing is False


@pytest.mark.asyncio
async def test_capture_fills_queue_in_order(queue):
    controller = CaptureController(FakeCaptureProvider(), queue, settle_delay_seconds=0)

    shots = [await controller.capture() for _ in range(6)]

    assert queue.snapshot() == tuple(shots[1:])


def test_cleanup_releases_provider(queue):
    provider = FakeCaptureProvider()
    CaptureController(provider, queue).cleanup()
    assert provider.cleaned_up
