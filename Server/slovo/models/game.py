"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class FeedbackMark(Enum):
    """Per-position evaluation of a guessed letter."""
    EXACT = "exact"
    PRESENT = "present"
    ABSENT = "absent"


class FeedbackMode(Enum):
    """How guesses are scored in a room."""
    POSITIONAL = "positional"
    BULLS_AND_COWS = "bulls_and_cows"


class RoomStatus(Enum):
    """Lifecycle of a room; derived from its players and round state."""
    EMPTY = "empty"
    WAITING = "waiting"
    IN_ROUND = "in_round"
    ROUND_OVER = "round_over"


@dataclass
class Player:
    """A connection taking part in a room."""
    connection_id: str
    display_name: str
    score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.connection_id, 'name': self.display_name, 'score': self.score}


@dataclass(frozen=True)
class Feedback:
    """
    Outcome of scoring one guess.

    ``marks`` is filled in positional mode; ``bulls`` and ``cows`` are always
    filled so both conventions can be read from either mode.
    """
    mode: FeedbackMode
    length: int
    bulls: int
    cows: int
    marks: Optional[Tuple[FeedbackMark, ...]] = None

    @property
    def solved(self) -> bool:
        return self.bulls == self.length

    def to_payload(self) -> Any:
        if self.mode == FeedbackMode.POSITIONAL:
            return [mark.value for mark in self.marks]
        return {'bulls': self.bulls, 'cows': self.cows}


@dataclass(frozen=True)
class GuessRecord:
    """One accepted guess; the room's history only ever appends these."""
    connection_id: str
    player_name: str
    guess_text: str
    feedback: Feedback

    def to_dict(self) -> Dict[str, Any]:
        return {
            'playerId': self.connection_id,
            'playerName': self.player_name,
            'guessText': self.guess_text,
            'feedback': self.feedback.to_payload(),
        }
