import os
import sys
import pytest
from flask.testing import FlaskClient

# Ensure the backend root (containing the `whowrote` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from whowrote import create_app, db, socketio
from whowrote.models import GameState, Identity
from whowrote.services.game import register_user, set_phase, submit_sentence


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ADMIN_PASSWORD = 'teacher123'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    STORE_RECOVER_CORRUPT = True
    BCRYPT_LOG_ROUNDS = 4
    WTF_CSRF_ENABLED = False


class FreshContextClient(FlaskClient):
    """Give every test request its own app context, as in production.

    The fixtures keep an app context open for the whole test; without this,
    each request would reuse it and share ``flask.g`` (and Flask-Login's
    cached user) across requests and clients.
    """

    def open(self, *args, **kwargs):
        with self.application.app_context():
            return super().open(*args, **kwargs)


def build_app(tmp_path, backend, **overrides):
    config = type('Config', (TestConfig,), {
        'STORE_BACKEND': backend,
        'DATA_FILE': str(tmp_path / 'data.json'),
        **overrides,
    })
    application = create_app(config)
    application.test_client_class = FreshContextClient
    return application


@pytest.fixture(params=['file', 'database'])
def flask_app(request, tmp_path):
    application = build_app(tmp_path, request.param)
    with application.app_context():
        import whowrote.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def strict_app(tmp_path):
    """File-backed app that refuses to paper over an unreadable document."""
    application = build_app(tmp_path, 'file', STORE_RECOVER_CORRUPT=False)
    with application.app_context():
        yield application


def corrupt_data_file(application):
    with open(application.config['DATA_FILE'], 'w', encoding='utf-8') as fh:
        fh.write('{"phase": 2, "users": [')


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def admin_client(flask_app):
    test_client = flask_app.test_client()
    res = test_client.post('/api/admin-login', json={'password': 'teacher123'})
    assert res.status_code == 200
    return test_client


@pytest.fixture()
def register(flask_app):
    """Register a student on a fresh test client and return that client."""
    def _register(username, display_name=None, password='pw'):
        test_client = flask_app.test_client()
        res = test_client.post('/api/register', json={
            'username': username,
            'displayName': display_name or username.title(),
            'password': password,
        })
        assert res.status_code == 200, res.get_json()
        return test_client
    return _register


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


ADMIN = Identity.admin()


@pytest.fixture()
def state_with_sentences():
    """Three students in phase 2 with one sentence each."""
    state = GameState()
    for name in ('alice', 'bob', 'cara'):
        register_user(state, name, name.title(), 'pw')
    set_phase(state, ADMIN, 2)
    for name in ('alice', 'bob', 'cara'):
        submit_sentence(state, Identity.student(name), f'S_{name[0].upper()}')
    return state
