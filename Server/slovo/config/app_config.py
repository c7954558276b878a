"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

from .game_settings import MAX_PLAYERS_PER_ROOM

# Load environment variables from config.env next to this module, then .env
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))
load_dotenv()


def _env_list(name: str, default: str = '') -> list:
    return [item.strip() for item in os.getenv(name, default).split(',') if item.strip()]


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', 10000))
    CORS_ORIGINS = os.getenv('FRONTEND_URL', '*')
    SOCKETIO_ASYNC_MODE = os.getenv('SOCKETIO_ASYNC_MODE') or None

    # Room Settings
    ROOM_CAPACITY = int(os.getenv('ROOM_CAPACITY', MAX_PLAYERS_PER_ROOM))
    ROOM_CLEANUP_DELAY_SECONDS = float(os.getenv('ROOM_CLEANUP_DELAY_SECONDS', 30))

    # Game Settings
    DEFAULT_LANGUAGE = os.getenv('DEFAULT_LANGUAGE', 'ru')
    DEFAULT_WORD_LENGTH = int(os.getenv('DEFAULT_WORD_LENGTH', 6))
    FEEDBACK_MODE = os.getenv('FEEDBACK_MODE', 'positional')
    DICTIONARY_CHECK_MODES = _env_list('DICTIONARY_CHECK_MODES')
    WORD_LIST_PATH = os.getenv('WORD_LIST_PATH') or None

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_TO_FILE = os.getenv('LOG_TO_FILE', 'True').lower() == 'true'


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    SOCKETIO_ASYNC_MODE = 'threading'
    ROOM_CLEANUP_DELAY_SECONDS = 0.05
    DICTIONARY_CHECK_MODES = []
    WORD_LIST_PATH = None
    LOG_TO_FILE = False


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
