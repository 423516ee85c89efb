import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _optional_int(name):
    value = os.environ.get(name)
    return int(value) if value not in (None, '') else None


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Card catalog loaded once at startup
    CARDS_CSV_PATH = os.environ.get('CARDS_CSV_PATH') or os.path.join(BASE_DIR, 'data', 'UK_Prime_Ministers.csv')
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '6'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '5'))
    # Optional: fixed seed for shuffling and room codes. Unset uses system entropy.
    SHUFFLE_SEED = _optional_int('SHUFFLE_SEED')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000',
        ).split(',')
        if origin.strip()
    ]
