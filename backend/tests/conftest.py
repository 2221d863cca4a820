import os
import sys
import pytest

# Ensure the backend root (containing the `leaderboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from leaderboard import create_app, db, socketio
from leaderboard.api import EVENT_BUS_KEY
from leaderboard.subscriptions import NAMESPACE


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Cheap hashes keep the suite fast
    BCRYPT_LOG_ROUNDS = 4
    BCRYPT_HANDLE_LONG_PASSWORDS = True
    SESSION_TYPE = 'sqlalchemy'
    SESSION_CLEANUP_N_REQUESTS = None
    CORS_ORIGINS = ['http://localhost:5173']
    TRUST_PROXY = False
    ACCESS_LOG = None
    REGISTRATION_REQUIRES_LOGIN = False
    PORT = 8080


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    # No app context stays pushed during the test: every request gets its
    # own, so per-request state (g, the logged-in user) is never shared
    with application.app_context():
        import leaderboard.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def event_bus(flask_app):
    return flask_app.extensions[EVENT_BUS_KEY]


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace=NAMESPACE,
    )
    yield test_client
    if test_client.is_connected(NAMESPACE):
        test_client.disconnect(namespace=NAMESPACE)


def call(client, operation, **variables):
    """POST one operation and return the decoded envelope."""
    res = client.post('/leaderboard', json={'operation': operation, 'variables': variables})
    assert res.status_code == 200
    return res.get_json()


def register_and_login(client, email='ann@leaderboard.io', password='secret1', name='Ann'):
    created = call(client, 'createUser', userInput={'email': email, 'password': password, 'name': name})
    assert created.get('errors') is None, created
    logged_in = call(client, 'login', email=email, password=password)
    assert logged_in.get('errors') is None, logged_in
    return logged_in['data']['login']


@pytest.fixture()
def auth_client(client):
    register_and_login(client)
    return client
