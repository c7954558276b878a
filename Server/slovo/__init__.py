"""
Slovo Boi Game Server Application Package

Realtime multiplayer word guessing: players share a room, a secret word is
chosen, and every guess is scored letter by letter and broadcast to the room.
"""

from flask import Flask
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config, word_source=None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        word_source: Optional WordSource; loaded from WORD_LIST_PATH otherwise

    Returns:
        Tuple of the Flask application and its SocketIO instance
    """
    from .services.room_registry import RoomRegistry
    from .services.session_service import SessionService
    from .services.word_source import WordSource
    from .utils.game_logger import game_logger
    from .websocket.handlers import register_websocket_handlers
    from .websocket.publisher import SocketIOPublisher

    app = Flask(__name__)
    app.config.from_object(config_class)

    game_logger.configure(
        log_dir=app.config['LOG_DIR'],
        level=app.config['LOG_LEVEL'],
        to_file=app.config['LOG_TO_FILE']
    )

    # Initialize extensions
    socketio = SocketIO(
        app,
        cors_allowed_origins=app.config['CORS_ORIGINS'],
        async_mode=app.config['SOCKETIO_ASYNC_MODE'],
        logger=False,
        engineio_logger=False
    )

    # Wire services
    if word_source is None:
        word_source = WordSource.from_file(app.config['WORD_LIST_PATH'])
    registry = RoomRegistry(
        cleanup_delay=app.config['ROOM_CLEANUP_DELAY_SECONDS'],
        start_task=socketio.start_background_task,
        sleep=socketio.sleep
    )
    session_service = SessionService(
        registry,
        word_source,
        SocketIOPublisher(socketio),
        room_capacity=app.config['ROOM_CAPACITY'],
        default_language=app.config['DEFAULT_LANGUAGE'],
        default_word_length=app.config['DEFAULT_WORD_LENGTH'],
        default_mode=app.config['FEEDBACK_MODE'],
        dictionary_check_modes=app.config['DICTIONARY_CHECK_MODES']
    )

    # Register WebSocket handlers
    register_websocket_handlers(socketio, session_service)

    # Store instances for use in other modules
    app.socketio = socketio
    app.session_service = session_service

    return app, socketio
