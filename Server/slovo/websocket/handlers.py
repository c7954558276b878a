"""
WebSocket Event Handlers

Handles all Socket.IO events for the multiplayer word game. Every action
answers through its acknowledgement: ``{'ok': True, ...}`` on success,
``{'ok': False, 'error': message}`` on failure. Failures are also emitted to
the caller as an ``error`` event for clients that do not request acks.
"""

from typing import Any, Callable, Dict

from flask import request
from flask_socketio import emit

from ..exceptions import SessionError
from ..models.events import (
    CreateRoomRequest, HistoryRequest, JoinRoomRequest, LeaveRoomRequest, StartRoundRequest,
    SubmitGuessRequest
)
from ..services.session_service import SessionService
from ..utils.game_logger import game_logger


def _room_of(data: Any):
    return data.get('roomId') if isinstance(data, dict) else None


def _run_action(action: str, data: Any, handler: Callable[[str], Dict[str, Any]]) -> Dict[str, Any]:
    """Run one inbound action for the current connection and build its ack."""
    connection_id = request.sid
    room_id = _room_of(data)
    game_logger.log_user_action(connection_id, action, room_id, payload=data)

    try:
        result = handler(connection_id)
        response = {'ok': True, **(result or {})}
        game_logger.log_server_response(connection_id, action, True, response, room_id)
        return response
    except SessionError as e:
        response = {'ok': False, 'error': e.message}
    except Exception as e:
        game_logger.log_error(connection_id, e, action, room_id)
        response = {'ok': False, 'error': 'Internal server error'}

    game_logger.log_server_response(connection_id, action, False, response, room_id)
    emit('error', {'action': action, 'error': response['error']})
    return response


def register_websocket_handlers(socketio, session_service: SessionService):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Handle WebSocket connection."""
        game_logger.log_user_action(request.sid, 'connect')

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Remove the connection from every room it was in."""
        connection_id = request.sid
        try:
            left = session_service.leave_room(connection_id)
            game_logger.log_user_action(connection_id, 'disconnect', rooms_left=left, reason=str(reason))
        except Exception as e:
            game_logger.log_error(connection_id, e, 'disconnect')

    @socketio.on('createRoom')
    def handle_create_room(data=None):
        """Create a room (or enter an existing one with the same ID)."""
        def run(connection_id):
            req = CreateRoomRequest.from_payload(data)
            snapshot = session_service.create_room(
                req.room_id, connection_id, req.player_name,
                language=req.language, word_length=req.word_length, mode=req.mode
            )
            return {'room': snapshot}
        return _run_action('createRoom', data, run)

    @socketio.on('joinRoom')
    def handle_join_room(data=None):
        """Join an existing room."""
        def run(connection_id):
            req = JoinRoomRequest.from_payload(data)
            return {'room': session_service.join_room(req.room_id, connection_id, req.player_name)}
        return _run_action('joinRoom', data, run)

    @socketio.on('leaveRoom')
    def handle_leave_room(data=None):
        """Leave one room, or every room when no roomId is given."""
        def run(connection_id):
            req = LeaveRoomRequest.from_payload(data)
            return {'rooms': session_service.leave_room(connection_id, req.room_id)}
        return _run_action('leaveRoom', data, run)

    @socketio.on('startRound')
    def handle_start_round(data=None):
        """Start a round with an explicit or a random secret word."""
        def run(connection_id):
            req = StartRoundRequest.from_payload(data)
            session_service.start_round(req.room_id, req.word, connection_id=connection_id)
            return {}
        return _run_action('startRound', data, run)

    @socketio.on('submitGuess')
    def handle_submit_guess(data=None):
        """Submit a guess for the current round."""
        def run(connection_id):
            req = SubmitGuessRequest.from_payload(data)
            result = session_service.submit_guess(req.room_id, connection_id, req.guess_text)
            return {'win': result['win']}
        return _run_action('submitGuess', data, run)

    @socketio.on('getHistory')
    def handle_get_history(data=None):
        """Guesses of the current round, for clients that (re)joined mid-round."""
        def run(connection_id):
            req = HistoryRequest.from_payload(data)
            return {'guesses': session_service.guess_history(req.room_id)}
        return _run_action('getHistory', data, run)
