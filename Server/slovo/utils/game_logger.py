"""
Game Logger Module for the Slovo Boi server

This module provides structured logging for player actions, server
responses, and room events.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path


class GameLogger:
    """
    Centralized logging system for the game server.

    Features:
    - Player action tracking by connection
    - Server response (acknowledgement) logging
    - Room and round event logging
    - JSON structured logs for easy parsing

    Handlers are attached by ``configure``; until then entries go through the
    ``slovo_game`` logger with whatever handlers the host application set up.
    """

    # Keys never written to the log while a round is running
    SECRET_FIELDS = ('secret_word', 'secretWord', 'word')

    def __init__(self, name: str = 'slovo_game'):
        self.logger = logging.getLogger(name)
        self.log_dir: Optional[Path] = None

    def configure(self, log_dir: str = "logs", level: str = "INFO", to_file: bool = True) -> logging.Logger:
        """Attach the file and console handlers."""
        logger = self.logger
        logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

        # Prevent duplicate handlers
        if logger.handlers:
            for handler in list(logger.handlers):
                handler.close()
            logger.handlers.clear()

        if to_file:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)

            # File handler for detailed logs
            file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            logger.addHandler(file_handler)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        logger.addHandler(console_handler)

        return logger

    def _log_file(self) -> Path:
        return self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _user_identity(self, connection_id: Optional[str], player_name: Optional[str] = None) -> Dict[str, Any]:
        return {
            'connection_id': connection_id or 'system',
            'player_name': player_name
        }

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          user_info: Dict[str, Any],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self,
                        connection_id: Optional[str],
                        action: str,
                        room_id: Optional[str] = None,
                        **kwargs):
        """
        Log player actions with full context.

        Args:
            connection_id: Socket connection of the player
            action: Type of action (e.g., 'createRoom', 'submitGuess')
            room_id: Room identifier if applicable
            **kwargs: Additional details to log
        """
        details = {'room_id': room_id, **self._sanitize(kwargs)}
        log_message = self._create_log_entry('USER_ACTION', action, self._user_identity(connection_id), details)
        self.logger.info(log_message)

    def log_server_response(self,
                            connection_id: Optional[str],
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            room_id: Optional[str] = None,
                            **kwargs):
        """
        Log acknowledgements sent back to a player.

        Args:
            connection_id: Socket connection of the player
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to client
            room_id: Room identifier if applicable
            **kwargs: Additional details to log
        """
        details = {
            'room_id': room_id,
            'success': success,
            'response_data': self._sanitize(response_data),
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, self._user_identity(connection_id), details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.error(log_message)

    def log_game_event(self,
                       room_id: Optional[str],
                       event: str,
                       connection_id: Optional[str],
                       **kwargs):
        """
        Log room events (rounds started and won, rooms created and deleted).

        Args:
            room_id: Room identifier
            event: Type of event (e.g., 'round_started', 'round_over')
            connection_id: Connection that caused the event, or 'system'
            **kwargs: Additional event details
        """
        details = {'room_id': room_id, **kwargs}
        log_message = self._create_log_entry('GAME_EVENT', event, self._user_identity(connection_id), details)
        self.logger.info(log_message)

    def log_error(self,
                  connection_id: Optional[str],
                  error: Exception,
                  action: str,
                  room_id: Optional[str] = None):
        """Log unexpected errors with full context."""
        details = {
            'room_id': room_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }
        log_message = self._create_log_entry('ERROR', action, self._user_identity(connection_id), details)
        self.logger.error(log_message)

    def _sanitize(self, data: Any) -> Dict[str, Any]:
        """Mask secret words in logged payloads."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = {}
        for key, value in data.items():
            if key in self.SECRET_FIELDS and value:
                sanitized[key] = '***'
            elif isinstance(value, dict):
                sanitized[key] = self._sanitize(value)
            else:
                sanitized[key] = value
        return sanitized

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about logged events (useful for monitoring)."""
        if self.log_dir is None:
            return {'error': 'File logging is disabled'}

        log_file = self._log_file()
        if not log_file.exists():
            return {'error': 'No log file found for today'}

        stats = {
            'log_file': str(log_file),
            'file_size_mb': round(log_file.stat().st_size / (1024 * 1024), 2),
            'total_entries': 0,
            'user_actions': 0,
            'server_responses': 0,
            'game_events': 0,
            'errors': 0
        }

        with open(log_file, 'r', encoding='utf-8') as f:
            for line in f:
                if line.strip():
                    stats['total_entries'] += 1
                    if 'USER_ACTION' in line:
                        stats['user_actions'] += 1
                    elif 'SERVER_RESPONSE' in line:
                        stats['server_responses'] += 1
                    elif 'GAME_EVENT' in line:
                        stats['game_events'] += 1
                    elif 'ERROR' in line:
                        stats['errors'] += 1

        return stats


# Global logger instance
game_logger = GameLogger()
