"""
WebSocket Package

Socket.IO transport: event handlers and the room broadcast publisher.
"""

from .handlers import register_websocket_handlers
from .publisher import SocketIOPublisher

__all__ = ['register_websocket_handlers', 'SocketIOPublisher']
