"""
Utilities Package

Contains utility functions and helper modules.
"""

from .game_logger import game_logger, GameLogger

__all__ = ['game_logger', 'GameLogger']
