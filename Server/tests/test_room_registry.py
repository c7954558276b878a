"""Tests for RoomRegistry creation and deferred cleanup."""
import threading
import time

from slovo.models.game import FeedbackMode
from slovo.services.room_registry import RoomRegistry

ROOM_OPTIONS = {'language': 'ru', 'word_length': 6, 'mode': FeedbackMode.POSITIONAL}


def test_get_or_create_never_overwrites(registry):
    room = registry.get_or_create('abc', **ROOM_OPTIONS)
    room.add_player('c1', 'Ann')
    room.start_round('яблоко')

    again = registry.get_or_create('abc', language='en', word_length=5)
    assert again is room
    assert again.word_length == 6
    assert again.secret_word == 'яблоко'
    assert len(registry) == 1


def test_get_missing_room(registry):
    assert registry.get('nope') is None
    assert 'nope' not in registry


def test_concurrent_get_or_create_returns_one_room():
    registry = RoomRegistry()
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        results.append(registry.get_or_create('shared', **ROOM_OPTIONS))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({id(room) for room in results}) == 1
    assert len(registry) == 1


def test_cleanup_deletes_empty_room(registry, runner):
    registry.get_or_create('abc', **ROOM_OPTIONS)
    registry.schedule_cleanup('abc')
    assert registry.has_pending_cleanup('abc')

    runner.run_all()
    assert registry.get('abc') is None
    assert not registry.has_pending_cleanup('abc')


def test_cancel_keeps_room(registry, runner):
    room = registry.get_or_create('abc', **ROOM_OPTIONS)
    registry.schedule_cleanup('abc')
    room.add_player('c1', 'Ann')
    assert registry.cancel_cleanup('abc')

    runner.run_all()
    assert registry.get('abc') is room


def test_cleanup_skips_room_that_is_no_longer_empty(registry, runner):
    room = registry.get_or_create('abc', **ROOM_OPTIONS)
    registry.schedule_cleanup('abc')
    room.add_player('c1', 'Ann')

    runner.run_all()
    assert registry.get('abc') is room
    assert not room.closed
    assert not registry.has_pending_cleanup('abc')


def test_rescheduling_replaces_previous_timer(registry, runner):
    registry.get_or_create('abc', **ROOM_OPTIONS)
    registry.schedule_cleanup('abc')
    first_task = runner.tasks[0]
    registry.schedule_cleanup('abc')

    target, args = first_task
    target(*args)
    assert registry.get('abc') is not None

    runner.run_all()
    assert registry.get('abc') is None


def test_closed_room_is_recreated(registry, runner):
    old = registry.get_or_create('abc', **ROOM_OPTIONS)
    registry.schedule_cleanup('abc')
    runner.run_all()

    new = registry.get_or_create('abc', **ROOM_OPTIONS)
    assert new is not old
    assert old.closed and not new.closed


def test_background_timer_fires():
    registry = RoomRegistry(cleanup_delay=0.05)
    registry.get_or_create('abc', **ROOM_OPTIONS)
    registry.schedule_cleanup('abc')

    deadline = time.time() + 3.0
    while time.time() < deadline and registry.get('abc') is not None:
        time.sleep(0.02)
    assert registry.get('abc') is None


def test_timer_cancelled_while_waiting_for_room_lock_does_not_delete(registry, runner, service):
    service.create_room('r1', 'c1', 'Ann')
    service.start_round('r1', 'молоко')
    service.leave_room('c1')
    target, args = runner.tasks.pop()
    room = registry.get('r1')

    with room.lock:
        timer = threading.Thread(target=target, args=args)
        timer.start()
        time.sleep(0.1)
        # The first timer is blocked on the room lock; rejoin, then leave again
        service.join_room('r1', 'c2', 'Bob')
        service.leave_room('c2')
    timer.join(timeout=3.0)

    assert registry.get('r1') is room
    assert room.secret_word == 'молоко'
    assert registry.has_pending_cleanup('r1')

    runner.run_all()
    assert registry.get('r1') is None
    assert not registry.has_pending_cleanup('r1')
