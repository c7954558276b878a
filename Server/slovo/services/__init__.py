"""
Services Package

Contains all business logic and service classes.
"""

from .word_source import WordSource
from .scoring import evaluate_guess, score_bulls_and_cows, score_positional
from .room_registry import RoomRegistry
from .session_service import EventPublisher, SessionService

__all__ = [
    'WordSource',
    'evaluate_guess', 'score_bulls_and_cows', 'score_positional',
    'RoomRegistry',
    'EventPublisher', 'SessionService'
]
