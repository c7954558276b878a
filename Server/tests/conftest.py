import os
import random
import sys
import pytest

# Ensure the server root (containing the `slovo` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
SERVER_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if SERVER_ROOT not in sys.path:
    sys.path.insert(0, SERVER_ROOT)

from slovo import create_app
from slovo.config import TestingConfig
from slovo.services.room_registry import RoomRegistry
from slovo.services.session_service import EventPublisher, SessionService
from slovo.services.word_source import WordSource


TEST_VOCABULARY = {
    'ru': {
        5: ['слово', 'книга'],
        6: ['яблоко', 'молоко', 'сердце', 'лёгкий'],
    },
    'en': {
        5: ['apple', 'crane', 'lemon', 'paper'],
    },
}


class RecordingPublisher(EventPublisher):
    """Keeps every outbound event instead of sending it."""

    def __init__(self):
        self.events = []
        self.members = {}

    def subscribe(self, connection_id, room_id):
        self.members.setdefault(room_id, set()).add(connection_id)

    def unsubscribe(self, connection_id, room_id):
        self.members.get(room_id, set()).discard(connection_id)

    def broadcast(self, room_id, event, payload):
        self.events.append((room_id, event, payload))

    def names(self, room_id=None):
        return [event for rid, event, _ in self.events if room_id is None or rid == room_id]

    def last(self, event):
        return [payload for _, name, payload in self.events if name == event][-1]

    def clear(self):
        self.events.clear()


class ManualTaskRunner:
    """Collects background tasks so tests decide when timers fire."""

    def __init__(self):
        self.tasks = []

    def start(self, target, *args):
        self.tasks.append((target, args))

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for target, args in tasks:
            target(*args)


@pytest.fixture()
def word_source():
    return WordSource(TEST_VOCABULARY, rng=random.Random(7))


@pytest.fixture()
def runner():
    return ManualTaskRunner()


@pytest.fixture()
def registry(runner):
    return RoomRegistry(cleanup_delay=30, start_task=runner.start, sleep=lambda seconds: None)


@pytest.fixture()
def publisher():
    return RecordingPublisher()


@pytest.fixture()
def service(registry, word_source, publisher):
    return SessionService(registry, word_source, publisher)


@pytest.fixture()
def flask_app(word_source):
    application, _ = create_app(TestingConfig, word_source=word_source)
    yield application


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def make():
        client = flask_app.socketio.test_client(flask_app)
        client.get_received()  # flush
        clients.append(client)
        return client

    yield make

    for client in clients:
        if client.is_connected():
            client.disconnect()
