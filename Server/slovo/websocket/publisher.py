"""
Socket.IO Publisher

Delivers session events to the connections joined to a Socket.IO room.
"""

from flask_socketio import SocketIO

from ..services.session_service import EventPublisher


class SocketIOPublisher(EventPublisher):
    """
    Maps game rooms onto Socket.IO rooms of the same name.

    Uses the underlying Socket.IO server directly so it works both inside an
    event handler and from background tasks without a request context.
    """

    def __init__(self, socketio: SocketIO, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def subscribe(self, connection_id: str, room_id: str) -> None:
        self.socketio.server.enter_room(connection_id, room_id, namespace=self.namespace)

    def unsubscribe(self, connection_id: str, room_id: str) -> None:
        self.socketio.server.leave_room(connection_id, room_id, namespace=self.namespace)

    def broadcast(self, room_id: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=room_id, namespace=self.namespace)
