import os
import sys
import pytest

# Ensure the backend root (containing the `buzzboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from buzzboard import create_app, db, socketio
from buzzboard.services.sessions import ManualClock, MemorySessionStore, SessionManager


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_STORE = 'sql'
    SESSION_TTL_SEC = 3600
    SESSION_LOCK_TIMEOUT_SEC = 1.0
    CORS_ORIGINS = ['http://localhost:5173']


class RecordingGateway:
    """Broadcast gateway double that keeps every published event in order."""

    def __init__(self):
        self.events = []

    def publish(self, session_id, event, payload):
        self.events.append((session_id, event, payload))
        return True

    def names(self):
        return [e[1] for e in self.events]


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import buzzboard.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def clock():
    return ManualClock(start_ms=1_700_000_000_000)


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def store():
    return MemorySessionStore()


@pytest.fixture()
def manager(store, gateway, clock):
    return SessionManager(store, gateway, clock=clock, ttl=60, lock_timeout=1.0)
