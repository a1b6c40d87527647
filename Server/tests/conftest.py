import os
import random
import sys
import tempfile

import pytest

# Ensure the server root (containing the `wordleplus` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
SERVER_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if SERVER_ROOT not in sys.path:
    sys.path.insert(0, SERVER_ROOT)

# Keep test runs out of the working directory's log folder
os.environ.setdefault('LOG_DIR', os.path.join(tempfile.gettempdir(), 'wordleplus-test-logs'))

from wordleplus import create_app
from wordleplus.config import TestingConfig
from wordleplus.services.dictionary import LocalDictionary
from wordleplus.services.game_service import GameService
from wordleplus.services.room_registry import RoomRegistry
from wordleplus.services.scheduler import ScheduledTask

TEST_WORDS = [
    'CRANE', 'PLANT', 'GRAPE', 'ALLOT', 'LLAMA', 'SWEET', 'WRONG',
    'WORLD', 'TABLE', 'ABOUT', 'HOUSE', 'MONEY', 'SPEED', 'EERIE',
]

NOW = 1_700_000_000.0


class ManualScheduler:
    """Records scheduled callbacks; tests decide when they fire."""

    def __init__(self):
        self.pending = []

    def schedule(self, delay, callback, *args):
        task = ScheduledTask(delay)
        self.pending.append((task, callback, args))
        return task

    def live(self):
        return [task for task, _, _ in self.pending if not task.cancelled and not task.fired]

    def run_all(self):
        """Fire every live task, as if all their delays had elapsed."""
        pending, self.pending = self.pending, []
        for task, callback, args in pending:
            if task.cancelled or task.fired:
                continue
            task.fired = True
            callback(*args)


class BroadcastRecorder:
    def __init__(self):
        self.sent = []

    def __call__(self, room_id, payload):
        self.sent.append((room_id, payload))

    def last(self, room_id):
        for sent_id, payload in reversed(self.sent):
            if sent_id == room_id:
                return payload
        return None


class FastGraceConfig(TestingConfig):
    RESUME_GRACE_SECONDS = 0


@pytest.fixture()
def dictionary():
    return LocalDictionary(TEST_WORDS, rng=random.Random(7))


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def broadcasts():
    return BroadcastRecorder()


@pytest.fixture()
def service(dictionary, scheduler, broadcasts):
    return GameService(
        RoomRegistry(rng=random.Random(1)),
        dictionary,
        scheduler,
        config=TestingConfig,
        clock=lambda: NOW,
        broadcaster=broadcasts,
    )


@pytest.fixture()
def no_grace_service(dictionary, scheduler):
    return GameService(
        RoomRegistry(rng=random.Random(2)),
        dictionary,
        scheduler,
        config=FastGraceConfig,
        clock=lambda: NOW,
    )


@pytest.fixture()
def duel_room(service):
    """Duel room with 'a' (host) and 'b' seated, no secrets yet."""
    room = service.create_room('a', 'Alice', 'duel')
    service.join_room('b', 'Bob', room.id)
    return room


@pytest.fixture()
def started_duel(service, duel_room):
    """Duel in progress: 'a' must find PLANT, 'b' must find CRANE."""
    service.set_secret('a', duel_room.id, 'crane')
    service.set_secret('b', duel_room.id, 'plant')
    return duel_room


@pytest.fixture()
def app_bundle(dictionary, scheduler):
    app, socketio = create_app(TestingConfig, dictionary=dictionary, scheduler=scheduler, clock=lambda: NOW)
    return app, socketio


@pytest.fixture()
def flask_app(app_bundle):
    return app_bundle[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(app_bundle):
    app, socketio = app_bundle
    clients = []

    def _make():
        test_client = socketio.test_client(app, flask_test_client=app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
