"""
Session Errors

Every failure a player can cause is a ``SessionError``. The message is
client-facing and is sent back in the action acknowledgement as
``{'ok': False, 'error': message}``.
"""

from typing import Optional


class SessionError(Exception):
    """Base class for recoverable, caller-facing validation failures."""

    default_message = "Invalid action"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidPayloadError(SessionError):
    default_message = "Malformed request"


class RoomIdRequiredError(SessionError):
    default_message = "Room ID is required"


class RoomNotFoundError(SessionError):
    default_message = "Room not found"


class RoomFullError(SessionError):
    default_message = "Room is full"


class PlayerNotInRoomError(SessionError):
    default_message = "You are not in this room"


class RoundNotStartedError(SessionError):
    default_message = "Round has not started"


class InvalidLengthError(SessionError):
    default_message = "Wrong word length"


class InvalidCharsetError(SessionError):
    default_message = "Word contains letters outside the room alphabet"


class NotInDictionaryError(SessionError):
    default_message = "Word not in word list"


class NoWordAvailableError(SessionError):
    default_message = "No word of the selected length"
