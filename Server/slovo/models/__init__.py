"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import Feedback, FeedbackMark, FeedbackMode, GuessRecord, Player, RoomStatus
from .room import Room
from .events import (
    CreateRoomRequest, HistoryRequest, JoinRoomRequest, LeaveRoomRequest, StartRoundRequest,
    SubmitGuessRequest
)

__all__ = [
    'Feedback', 'FeedbackMark', 'FeedbackMode', 'GuessRecord', 'Player', 'RoomStatus', 'Room',
    'CreateRoomRequest', 'HistoryRequest', 'JoinRoomRequest', 'LeaveRoomRequest', 'StartRoundRequest',
    'SubmitGuessRequest'
]
