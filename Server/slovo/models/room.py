"""
Room Model

One game session: its players, the secret word of the current round and the
guess history. All mutation goes through methods that take ``room.lock``;
callers that need several steps to be atomic hold the lock themselves (it is
re-entrant).
"""

import threading
from typing import Any, Dict, List, Optional

from ..config.game_settings import MAX_PLAYERS_PER_ROOM
from ..exceptions import RoomFullError
from .game import FeedbackMode, GuessRecord, Player, RoomStatus


class Room:
    """Mutable state of a single room."""

    def __init__(self,
                 room_id: str,
                 language: str,
                 word_length: int,
                 mode: FeedbackMode = FeedbackMode.POSITIONAL,
                 capacity: int = MAX_PLAYERS_PER_ROOM):
        self.room_id = room_id
        self.language = language
        self.word_length = word_length
        self.mode = mode
        self.capacity = capacity

        self.lock = threading.RLock()
        self.closed = False  # set once the registry has deleted the room

        self.players: Dict[str, Player] = {}
        self.secret_word: Optional[str] = None
        self.guess_history: List[GuessRecord] = []
        self.round_number = 0
        self.round_over = False
        self.winner: Optional[Player] = None

    @property
    def status(self) -> RoomStatus:
        if not self.players:
            return RoomStatus.EMPTY
        if self.secret_word is None:
            return RoomStatus.WAITING
        if self.round_over:
            return RoomStatus.ROUND_OVER
        return RoomStatus.IN_ROUND

    @property
    def is_empty(self) -> bool:
        return not self.players

    @property
    def in_round(self) -> bool:
        return self.secret_word is not None and not self.round_over

    def get_player(self, connection_id: str) -> Optional[Player]:
        return self.players.get(connection_id)

    def add_player(self, connection_id: str, display_name: str) -> Player:
        """
        Add a player, or rename the existing one for a known connection.

        Raises:
            RoomFullError: If a new player would exceed the capacity
        """
        with self.lock:
            existing = self.players.get(connection_id)
            if existing:
                existing.display_name = display_name
                return existing
            if len(self.players) >= self.capacity:
                raise RoomFullError(f"Room {self.room_id} is full ({self.capacity} players)")
            player = Player(connection_id=connection_id, display_name=display_name)
            self.players[connection_id] = player
            return player

    def remove_player(self, connection_id: str) -> Optional[Player]:
        with self.lock:
            return self.players.pop(connection_id, None)

    def start_round(self, secret_word: str) -> int:
        """Store a new secret and wipe the previous round. Returns the round number."""
        with self.lock:
            self.secret_word = secret_word
            self.guess_history = []
            self.round_over = False
            self.winner = None
            self.round_number += 1
            return self.round_number

    def record_guess(self, record: GuessRecord) -> None:
        with self.lock:
            self.guess_history.append(record)

    def finish_round(self, winner: Player) -> None:
        """Reveal the secret and freeze the history; the winner scores a point."""
        with self.lock:
            self.round_over = True
            self.winner = winner
            winner.score += 1

    def snapshot(self) -> Dict[str, Any]:
        """Public view of the room. Never contains the secret word."""
        with self.lock:
            return {
                'roomId': self.room_id,
                'players': [player.to_dict() for player in self.players.values()],
                'wordLength': self.word_length,
                'language': self.language,
                'mode': self.mode.value,
                'status': self.status.value,
                'roundNumber': self.round_number,
                'capacity': self.capacity,
            }
