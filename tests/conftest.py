import os
import sys
import pytest

# Ensure the project root (containing `config` and `fishing_relay`) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fishing_relay import create_app, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    STATIC_FOLDER = os.path.join(CURRENT_DIR, 'no-static')
    SOCKETIO_NAMESPACE = '/'
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'
    MAX_PLAYERS_PER_ROOM = 4
    ROOM_RETENTION_MS = 300000
    REAPER_INTERVAL_SEC = 60
    FISH_SPAWN_TTL_SEC = 30


class RecordingEmitter:
    """Stands in for socketio.emit and records every send."""

    def __init__(self):
        self.sent = []

    def __call__(self, event, data=None, to=None):
        self.sent.append((event, data, to))

    def to(self, sid):
        return [(event, data) for event, data, target in self.sent if target == sid]

    def events(self, name):
        return [(data, target) for event, data, target in self.sent if event == name]

    def clear(self):
        self.sent.clear()


class FakeClock:
    def __init__(self, now=1_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture()
def emitter():
    return RecordingEmitter()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def relay(flask_app):
    return flask_app.extensions['fishing_relay']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    created = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/'
        )
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        if test_client.is_connected('/'):
            test_client.disconnect(namespace='/')


@pytest.fixture()
def sio_client(make_sio_client):
    return make_sio_client()
