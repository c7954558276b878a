"""
Session Service

Coordinates player actions: validates them, mutates rooms through the
registry, scores guesses, and broadcasts the outcome to everyone in the room.

Every action that touches a room runs under that room's lock, and
broadcasts are published before the lock is released, so the events of a
room go out in the order its actions were accepted. A rejected action raises
a ``SessionError`` before anything in the room changes.
"""

from typing import Any, Dict, Iterable, List, Optional

from ..config.game_settings import MAX_PLAYERS_PER_ROOM, MAX_WORD_LENGTH, MIN_WORD_LENGTH
from ..exceptions import (
    InvalidCharsetError, InvalidLengthError, InvalidPayloadError, NoWordAvailableError,
    NotInDictionaryError, PlayerNotInRoomError, RoomIdRequiredError, RoomNotFoundError,
    RoundNotStartedError
)
from ..models.game import FeedbackMode, GuessRecord
from ..models.room import Room
from ..utils.game_logger import game_logger
from .room_registry import RoomRegistry
from .scoring import evaluate_guess
from .word_source import WordSource, split_letters


class EventPublisher:
    """
    Outbound side of the transport.

    ``broadcast`` is fire-and-forget: it must not wait for clients to
    acknowledge delivery.
    """

    def subscribe(self, connection_id: str, room_id: str) -> None:
        raise NotImplementedError

    def unsubscribe(self, connection_id: str, room_id: str) -> None:
        raise NotImplementedError

    def broadcast(self, room_id: str, event: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class SessionService:
    """Room lifecycle, rounds and guesses for all rooms of this process."""

    def __init__(self,
                 registry: RoomRegistry,
                 word_source: WordSource,
                 publisher: EventPublisher,
                 room_capacity: int = MAX_PLAYERS_PER_ROOM,
                 default_language: str = 'ru',
                 default_word_length: int = 6,
                 default_mode: str = 'positional',
                 dictionary_check_modes: Iterable[str] = ()):
        self.registry = registry
        self.word_source = word_source
        self.publisher = publisher
        self.room_capacity = room_capacity
        self.default_language = default_language
        self.default_word_length = default_word_length
        self.default_mode = FeedbackMode(default_mode)
        self.dictionary_check_modes = frozenset(dictionary_check_modes)

    # ---------- room lifecycle ---------- #

    def create_room(self,
                    room_id: str,
                    connection_id: str,
                    player_name: str,
                    language: Optional[str] = None,
                    word_length: Optional[int] = None,
                    mode: Optional[str] = None) -> Dict[str, Any]:
        """
        Create the room if needed and add the player to it.

        Language, word length and mode only apply when the room is new; an
        existing room keeps its settings, players, secret and history.

        Returns:
            The room snapshot that was broadcast
        """
        if not room_id or not room_id.strip():
            raise RoomIdRequiredError()

        language = language or self.default_language
        if not self.word_source.supports(language):
            raise InvalidPayloadError(f"Unsupported language '{language}'")

        word_length = self.default_word_length if word_length is None else word_length
        if not MIN_WORD_LENGTH <= word_length <= MAX_WORD_LENGTH:
            raise InvalidPayloadError(
                f"Word length must be between {MIN_WORD_LENGTH} and {MAX_WORD_LENGTH}"
            )

        try:
            feedback_mode = FeedbackMode(mode) if mode else self.default_mode
        except ValueError:
            raise InvalidPayloadError(f"Unknown mode '{mode}'")

        while True:
            room = self.registry.get_or_create(
                room_id,
                language=language,
                word_length=word_length,
                mode=feedback_mode,
                capacity=self.room_capacity,
            )
            with room.lock:
                # Deleted by a cleanup between lookup and lock: create it again
                if room.closed:
                    continue
                return self._admit(room, connection_id, player_name)

    def join_room(self, room_id: str, connection_id: str, player_name: str) -> Dict[str, Any]:
        """Add the player to an existing room and broadcast the new snapshot."""
        room = self._require_room(room_id)
        with room.lock:
            if room.closed:
                raise RoomNotFoundError(f"Room {room_id} not found")
            return self._admit(room, connection_id, player_name)

    def leave_room(self, connection_id: str, room_id: Optional[str] = None) -> List[str]:
        """
        Remove the player from ``room_id``, or from every room when it is None.

        Rooms left empty are scheduled for cleanup.

        Returns:
            IDs of the rooms the player was removed from
        """
        explicit = room_id is not None
        rooms = [self._require_room(room_id)] if explicit else self.registry.rooms()

        left = []
        for room in rooms:
            with room.lock:
                if room.closed:
                    if explicit:
                        raise RoomNotFoundError(f"Room {room_id} not found")
                    continue
                player = room.remove_player(connection_id)
                if player is None:
                    if explicit:
                        raise PlayerNotInRoomError()
                    continue

                self.publisher.unsubscribe(connection_id, room.room_id)
                left.append(room.room_id)
                game_logger.log_game_event(
                    room.room_id, 'player_left', connection_id,
                    player_name=player.display_name, players=len(room.players)
                )

                self.publisher.broadcast(room.room_id, 'roomUpdate', room.snapshot())
                if room.is_empty:
                    self.registry.schedule_cleanup(room.room_id)
        return left

    def room_snapshot(self, room_id: str) -> Dict[str, Any]:
        return self._require_room(room_id).snapshot()

    def guess_history(self, room_id: str) -> List[Dict[str, Any]]:
        """Guesses of the current round, oldest first."""
        room = self._require_room(room_id)
        with room.lock:
            return [record.to_dict() for record in room.guess_history]

    # ---------- rounds ---------- #

    def start_round(self, room_id: str, word: Optional[str] = None,
                    connection_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Start a new round with ``word`` as the secret, or a random word.

        Starting while a round is running discards that round.

        Returns:
            The ``roundStarted`` payload (never includes the secret)
        """
        room = self._require_room(room_id)
        with room.lock:
            if room.closed:
                raise RoomNotFoundError(f"Room {room_id} not found")

            if word:
                secret = self._normalize_word(room, word, check_dictionary=True)
            else:
                secret = self.word_source.pick_random(room.language, room.word_length)
                if secret is None:
                    raise NoWordAvailableError(
                        f"No {room.language} words of length {room.word_length}"
                    )

            round_number = room.start_round(secret)
            game_logger.log_game_event(
                room_id, 'round_started', connection_id,
                round_number=round_number, word_length=room.word_length,
                explicit_word=bool(word)
            )

            payload = {'wordLength': room.word_length, 'roundNumber': round_number}
            self.publisher.broadcast(room_id, 'roundStarted', payload)
            return payload

    def submit_guess(self, room_id: str, connection_id: str, guess_text: str) -> Dict[str, Any]:
        """
        Score a guess, record it, and broadcast the result.

        A winning guess ends the round: the secret is revealed in
        ``roundOver`` and the winner's score goes up.

        Returns:
            ``{'win': bool, 'feedback': ...}``
        """
        room = self._require_room(room_id)
        with room.lock:
            if room.closed:
                raise RoomNotFoundError(f"Room {room_id} not found")

            player = room.get_player(connection_id)
            if player is None:
                raise PlayerNotInRoomError()
            if room.secret_word is None:
                raise RoundNotStartedError()
            if room.round_over:
                raise RoundNotStartedError("Round is over, start a new round")

            guess = self._normalize_word(
                room, guess_text,
                check_dictionary=room.mode.value in self.dictionary_check_modes
            )

            feedback = evaluate_guess(room.secret_word, guess, room.mode)
            record = GuessRecord(
                connection_id=connection_id,
                player_name=player.display_name,
                guess_text=guess,
                feedback=feedback,
            )
            room.record_guess(record)
            self.publisher.broadcast(room_id, 'guessResult', record.to_dict())

            if feedback.solved:
                room.finish_round(player)
                game_logger.log_game_event(
                    room_id, 'round_over', connection_id,
                    winner=player.display_name, secret_word=room.secret_word,
                    round_number=room.round_number, guesses=len(room.guess_history)
                )
                self.publisher.broadcast(room_id, 'roundOver', {
                    'winner': player.display_name,
                    'winnerId': connection_id,
                    'secretWord': room.secret_word,
                })
                self.publisher.broadcast(room_id, 'roomUpdate', room.snapshot())

            return {'win': feedback.solved, 'feedback': feedback.to_payload()}

    # ---------- helpers ---------- #

    def _require_room(self, room_id: str) -> Room:
        if not room_id:
            raise RoomIdRequiredError()
        room = self.registry.get(room_id)
        if room is None:
            raise RoomNotFoundError(f"Room {room_id} not found")
        return room

    def _admit(self, room: Room, connection_id: str, player_name: str) -> Dict[str, Any]:
        """Add a player to a locked, live room; cancel its cleanup; broadcast."""
        player = room.add_player(connection_id, player_name)
        self.registry.cancel_cleanup(room.room_id)
        self.publisher.subscribe(connection_id, room.room_id)
        game_logger.log_game_event(
            room.room_id, 'player_joined', connection_id,
            player_name=player.display_name, players=len(room.players)
        )

        snapshot = room.snapshot()
        self.publisher.broadcast(room.room_id, 'roomUpdate', snapshot)
        return snapshot

    def _normalize_word(self, room: Room, text: str, check_dictionary: bool) -> str:
        """Normalize a guess or secret and check it against the room's rules."""
        word = self.word_source.normalize(text, room.language)
        if not self.word_source.is_in_alphabet(word, room.language):
            raise InvalidCharsetError()

        length = len(split_letters(word))
        if length != room.word_length:
            raise InvalidLengthError(f"Word must be exactly {room.word_length} letters, got {length}")

        if check_dictionary and not self.word_source.is_valid(word, room.language, room.word_length):
            raise NotInDictionaryError()
        return word
