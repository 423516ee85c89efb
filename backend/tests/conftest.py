import os
import sys
import pytest

# Ensure the backend root (containing the `pmtrumps` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from pmtrumps import create_app, socketio
from pmtrumps.models import Card, Player, Room

FIXTURE_CSV = os.path.join(CURRENT_DIR, 'data', 'cards.csv')


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CARDS_CSV_PATH = FIXTURE_CSV
    MAX_PLAYERS = 6
    ROOM_CODE_LENGTH = 5
    SHUFFLE_SEED = 1234
    LOG_LEVEL = 'DEBUG'
    CORS_ORIGINS = ['http://localhost:5173']


def make_card(name, **stats):
    return Card(name=name, image=f'{name.lower()}.png', stats={k: str(v) for k, v in stats.items()})


def make_catalog(count):
    return [make_card(f'PM{i}', Age=30 + i, AgeAtPM=40 + i) for i in range(count)]


def make_room(*decks, code='TEST1'):
    """Room already dealt with the given decks, one player per deck."""
    players = [Player(id=i + 1, name=f'P{i + 1}', deck=list(deck)) for i, deck in enumerate(decks)]
    return Room(
        code=code,
        players=players,
        total_dealt=sum(len(d) for d in decks),
        dealt=True,
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


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
