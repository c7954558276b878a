"""
Event Data Models

Typed records for inbound Socket.IO payloads. Each ``from_payload`` checks
shape and types and raises ``InvalidPayloadError`` before any room is
touched. Domain checks (room exists, word length, alphabet) belong to the
session service.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..exceptions import InvalidPayloadError, RoomIdRequiredError


def _require_dict(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise InvalidPayloadError("Payload must be an object")
    return data


def _room_id(data: Dict[str, Any]) -> str:
    room_id = data.get('roomId')
    if room_id is None:
        raise RoomIdRequiredError()
    if isinstance(room_id, int) and not isinstance(room_id, bool):
        room_id = str(room_id)
    if not isinstance(room_id, str):
        raise InvalidPayloadError("roomId must be a string")
    room_id = room_id.strip()
    if not room_id:
        raise RoomIdRequiredError()
    return room_id


def _text(data: Dict[str, Any], *keys: str, required: bool = True) -> Optional[str]:
    """First present key among ``keys`` (aliases), as a stripped string."""
    value = None
    for key in keys:
        if data.get(key) is not None:
            value = data[key]
            break
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise InvalidPayloadError(f"{keys[0]} is required")
        return None
    if not isinstance(value, str):
        raise InvalidPayloadError(f"{keys[0]} must be a string")
    return value.strip()


@dataclass(frozen=True)
class CreateRoomRequest:
    room_id: str
    player_name: str
    language: Optional[str] = None
    word_length: Optional[int] = None
    mode: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Any) -> 'CreateRoomRequest':
        data = _require_dict(data)
        word_length = data.get('wordLength')
        if word_length is not None:
            if isinstance(word_length, str) and word_length.strip().isdigit():
                word_length = int(word_length)
            if isinstance(word_length, bool) or not isinstance(word_length, int):
                raise InvalidPayloadError("wordLength must be an integer")
        return cls(
            room_id=_room_id(data),
            player_name=_text(data, 'playerName'),
            language=_text(data, 'language', 'lang', required=False),
            word_length=word_length,
            mode=_text(data, 'mode', required=False),
        )


@dataclass(frozen=True)
class JoinRoomRequest:
    room_id: str
    player_name: str

    @classmethod
    def from_payload(cls, data: Any) -> 'JoinRoomRequest':
        data = _require_dict(data)
        return cls(room_id=_room_id(data), player_name=_text(data, 'playerName'))


@dataclass(frozen=True)
class StartRoundRequest:
    room_id: str
    word: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Any) -> 'StartRoundRequest':
        data = _require_dict(data)
        return cls(room_id=_room_id(data), word=_text(data, 'word', required=False))


@dataclass(frozen=True)
class SubmitGuessRequest:
    room_id: str
    guess_text: str

    @classmethod
    def from_payload(cls, data: Any) -> 'SubmitGuessRequest':
        data = _require_dict(data)
        return cls(room_id=_room_id(data), guess_text=_text(data, 'guessText', 'guess'))


@dataclass(frozen=True)
class LeaveRoomRequest:
    room_id: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Any) -> 'LeaveRoomRequest':
        if data is None:
            return cls()
        data = _require_dict(data)
        if data.get('roomId') is None:
            return cls()
        return cls(room_id=_room_id(data))


@dataclass(frozen=True)
class HistoryRequest:
    room_id: str

    @classmethod
    def from_payload(cls, data: Any) -> 'HistoryRequest':
        return cls(room_id=_room_id(_require_dict(data)))
