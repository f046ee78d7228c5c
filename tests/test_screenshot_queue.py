"""Tests for the bounded screenshot queue."""

import pytest

from support import make_image
from core.interfaces.events import EventType
from modules.queue.screenshot_queue import ScreenshotQueue


def queue_actions(bus):
    return [e.data["action"] for e in reversed(bus.get_history(EventType.QUEUE_CHANGED))]


def test_add_returns_shot_with_thumbnail(queue, image):
    shot = queue.add(image)

    assert shot.image is image
    assert shot.thumbnail.size == (128, 72)
    assert queue.snapshot() == (shot,)
    assert len(queue) == 1


def test_shot_ids_are_unique(queue, image):
    ids = {queue.add(image).shot_id for _ in range(5)}
    assert len(ids) == 5


def test_adding_to_full_queue_evicts_oldest(queue):
    shots = [queue.add(make_image((i * 40, 0, 0))) for i in range(5)]
    assert queue.is_full()

    newest = queue.add(make_image((0, 0, 255)))

    assert len(queue) == 5
    assert queue.snapshot() == tuple(shots[1:]) + (newest,)


def test_size_never_exceeds_capacity(event_bus):
    queue = ScreenshotQueue(max_size=2, event_bus=event_bus)
    for _ in range(7):
        queue.add(make_image())
        assert len(queue) <= 2


def test_invalid_capacity_rejected():
    with pytest.raises(ValueError):
        ScreenshotQueue(max_size=0)


def test_remove_at_removes_only_that_shot(queue):
    a, b, c = (queue.add(make_image()) for _ in range(3))

    assert queue.remove_at(1) is True
    assert queue.snapshot() == (a, c)
    assert b not in queue.snapshot()


@pytest.mark.parametrize("index", [3, 10, -1])
def test_remove_at_out_of_range_is_noop(queue, event_bus, index):
    shots = tuple(queue.add(make_image()) for _ in range(3))
    event_bus.clear_history()

    assert queue.remove_at(index) is False
    assert queue.snapshot() == shots
    assert event_bus.get_history(EventType.QUEUE_CHANGED) == []


def test_clear_empties_queue(queue, image):
    queue.add(image)
    queue.add(image)

    queue.clear()

    assert queue.snapshot() == ()
    assert queue.images() == []


def test_clear_on_empty_queue_publishes_nothing(queue, event_bus):
    queue.clear()
    queue.clear()

    assert len(queue) == 0
    assert event_bus.get_history(EventType.QUEUE_CHANGED) == []


def test_snapshot_is_detached_from_later_changes(queue, image):
    queue.add(image)
    view = queue.snapshot()

    queue.add(image)

    assert len(view) == 1
    assert len(queue.snapshot()) == 2


def test_images_in_insertion_order(queue):
    first, second = make_image((1, 1, 1)), make_image((2, 2, 2))
    queue.add(first)
    queue.add(second)

    assert queue.images() == [first, second]


def test_mutations_publish_events(queue, event_bus):
    for _ in range(6):
        queue.add(make_image())
    queue.remove_at(0)
    queue.clear()

    assert queue_actions(event_bus) == ["added"] * 5 + ["evicted", "added", "removed", "cleared"]

    last = event_bus.get_history(EventType.QUEUE_CHANGED, limit=1)[0]
    assert last.data["size"] == 0
    assert last.source == "screenshot_queue"


def test_evicted_event_names_the_dropped_shot(event_bus):
    queue = ScreenshotQueue(max_size=1, event_bus=event_bus)
    first = queue.add(make_image())
    queue.add(make_image())

    evicted = [
        e for e in event_bus.get_history(EventType.QUEUE_CHANGED)
        if e.data["action"] == "evicted"
    ]
    assert [e.data["shot_id"] for e in evicted] == [first.shot_id]


def test_queue_without_bus_still_works(image):
    queue = ScreenshotQueue(max_size=1)
    queue.add(image)
    queue.add(image)
    assert len(queue) == 1
