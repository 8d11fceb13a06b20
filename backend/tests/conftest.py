import os
import sys
import pytest
from flask import g

# Ensure the backend root (containing the `fingle` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from fingle import create_app, db, socketio
from fingle.fingers import to_finger_set
from fingle.services.notifications import NotificationDispatcher
from fingle.services.photos import PhotoStore
from fingle.socketio_events import registry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']
    LEADERBOARD_LIMIT = 50
    WEEKLY_WINDOW_DAYS = 7
    MONTHLY_WINDOW_DAYS = 30
    MAX_CONTENT_LENGTH = 1024 * 1024
    PHOTO_UPLOAD_DIR = '/tmp/fingle-test-uploads'
    PHOTO_BASE_URL = 'https://photos.test/'


class RecordingNotifier(NotificationDispatcher):
    def __init__(self):
        self.sent = []

    def notify(self, user_id, event, payload):
        self.sent.append((user_id, event, payload))

    def events(self, name):
        return [(uid, payload) for uid, event, payload in self.sent if event == name]


class MemoryPhotoStore(PhotoStore):
    def __init__(self):
        self.photos = {}

    def store(self, data, filename=''):
        ref = f"https://photos.test/{len(self.photos) + 1}.jpg"
        self.photos[ref] = data
        return ref


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    application.extensions['fingle.notifier'] = RecordingNotifier()
    application.extensions['fingle.photo_store'] = MemoryPhotoStore()
    registry.clear()
    with application.app_context():
        # Ensure models are imported so tables are created
        import fingle.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def notifier(flask_app):
    return flask_app.extensions['fingle.notifier']


@pytest.fixture()
def photo_store(flask_app):
    return flask_app.extensions['fingle.photo_store']


@pytest.fixture()
def make_user(flask_app):
    from fingle.models import User

    def _make(username, **kwargs):
        user = User(username=username, **kwargs)
        db.session.add(user)
        db.session.commit()
        return user.id
    return _make


@pytest.fixture()
def befriend(flask_app):
    from fingle.models import Friendship

    def _befriend(initiator_id, receiver_id, status='ACCEPTED'):
        db.session.add(Friendship(initiator_id=initiator_id, receiver_id=receiver_id, status=status))
        db.session.commit()
    return _befriend


@pytest.fixture()
def make_challenge(flask_app):
    from fingle.models import Challenge

    def _make(sender_id, receiver_id, count=3, fingers=('index', 'middle', 'ring')):
        challenge = Challenge(
            sender_id=sender_id,
            receiver_id=receiver_id,
            photo_url='https://photos.test/seed.jpg',
            finger_count=count,
            which_fingers=to_finger_set(fingers),
        )
        db.session.add(challenge)
        db.session.commit()
        return challenge.id
    return _make


def login(test_client, user_id):
    """Act as ``user_id`` the way the identity service's session cookie would."""
    with test_client.session_transaction() as sess:
        sess['_user_id'] = str(user_id)
        sess['_fresh'] = True
    # Requests share the fixture's app context, so drop Flask-Login's cached user
    g.pop('_login_user', None)


@pytest.fixture()
def login_as(client):
    def _login(user_id):
        login(client, user_id)
        return client
    return _login


@pytest.fixture()
def sio_client_for(flask_app):
    clients = []

    def _connect(user_id=None):
        http_client = flask_app.test_client()
        g.pop('_login_user', None)
        if user_id is not None:
            login(http_client, user_id)
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=http_client,
            namespace='/ws'
        )
        clients.append(test_client)
        return test_client
    yield _connect
    for c in clients:
        try:
            if c.is_connected('/ws'):
                c.disconnect(namespace='/ws')
        except Exception:
            pass
