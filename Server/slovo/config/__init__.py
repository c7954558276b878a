"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Languages, alphabets and vocabulary (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    ALPHABETS, LETTER_FOLDS, MAX_PLAYERS_PER_ROOM, load_vocabularies,
    validate_vocabulary_integrity, get_word_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'ALPHABETS', 'LETTER_FOLDS', 'MAX_PLAYERS_PER_ROOM', 'load_vocabularies',
    'validate_vocabulary_integrity', 'get_word_statistics'
]
