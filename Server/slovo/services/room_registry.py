"""
Room Registry

Owns the mapping from room ID to Room: creation, lookup, and deferred
deletion of rooms nobody is in any more.
"""

import threading
import time
from typing import Callable, Dict, List, Optional

from ..models.room import Room
from ..utils.game_logger import game_logger


def _start_thread(target: Callable, *args) -> None:
    threading.Thread(target=target, args=args, daemon=True).start()


class RoomRegistry:
    """
    Thread-safe in-memory room registry.

    Empty rooms are not deleted straight away: ``schedule_cleanup`` arms a
    one-shot timer and a player joining before it fires cancels it, so a page
    refresh does not lose the secret word and history.

    Lock order: room lock first, then the registry lock. The registry never
    acquires a room lock while holding its own lock.
    """

    def __init__(self,
                 cleanup_delay: float = 30.0,
                 start_task: Optional[Callable] = None,
                 sleep: Optional[Callable[[float], None]] = None):
        self.cleanup_delay = cleanup_delay
        self._start_task = start_task or _start_thread
        self._sleep = sleep or time.sleep

        self._rooms: Dict[str, Room] = {}
        self._pending_cleanup: Dict[str, object] = {}  # room_id -> token of the armed timer
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, room_id: str) -> bool:
        with self._lock:
            return room_id in self._rooms

    def get_or_create(self, room_id: str, **room_options) -> Room:
        """
        Return the room for ``room_id``, creating it with ``room_options`` if needed.

        An existing room is returned untouched; options only apply to a new room.
        """
        with self._lock:
            room = self._rooms.get(room_id)
            if room is not None and not room.closed:
                return room
            room = Room(room_id, **room_options)
            self._rooms[room_id] = room

        game_logger.log_game_event(
            room_id, 'room_created', 'system',
            language=room.language, word_length=room.word_length, mode=room.mode.value
        )
        return room

    def get(self, room_id: str) -> Optional[Room]:
        with self._lock:
            room = self._rooms.get(room_id)
        if room is None or room.closed:
            return None
        return room

    def rooms(self) -> List[Room]:
        """Snapshot of the live rooms."""
        with self._lock:
            return [room for room in self._rooms.values() if not room.closed]

    def remove(self, room_id: str) -> Optional[Room]:
        with self._lock:
            self._pending_cleanup.pop(room_id, None)
            room = self._rooms.pop(room_id, None)
        if room is not None:
            room.closed = True
        return room

    def schedule_cleanup(self, room_id: str, delay: Optional[float] = None) -> None:
        """Arm deletion of ``room_id`` after ``delay`` seconds; replaces any armed timer."""
        delay = self.cleanup_delay if delay is None else delay
        token = object()
        with self._lock:
            if room_id not in self._rooms:
                return
            self._pending_cleanup[room_id] = token

        game_logger.log_game_event(room_id, 'cleanup_scheduled', 'system', delay_seconds=delay)
        self._start_task(self._run_cleanup, room_id, token, delay)

    def cancel_cleanup(self, room_id: str) -> bool:
        """Disarm a pending deletion. Returns True if one was armed."""
        with self._lock:
            cancelled = self._pending_cleanup.pop(room_id, None) is not None
        if cancelled:
            game_logger.log_game_event(room_id, 'cleanup_cancelled', 'system')
        return cancelled

    def has_pending_cleanup(self, room_id: str) -> bool:
        with self._lock:
            return room_id in self._pending_cleanup

    def _run_cleanup(self, room_id: str, token: object, delay: float) -> None:
        if delay > 0:
            self._sleep(delay)
        self.expire(room_id, token)

    def expire(self, room_id: str, token: object) -> bool:
        """
        Delete ``room_id`` if ``token`` is still the armed timer and the room is empty.

        The token is checked again under the room lock, so a timer cancelled
        by a join while it waited for that lock never deletes the room.

        Returns True if the room was deleted.
        """
        with self._lock:
            if self._pending_cleanup.get(room_id) is not token:
                return False
            room = self._rooms.get(room_id)
        if room is None:
            return False

        with room.lock:
            with self._lock:
                if self._pending_cleanup.get(room_id) is not token:
                    return False
                del self._pending_cleanup[room_id]
                if not room.is_empty:
                    return False
                room.closed = True
                if self._rooms.get(room_id) is room:
                    del self._rooms[room_id]

        game_logger.log_game_event(room_id, 'room_deleted', 'system', rounds_played=room.round_number)
        return True
