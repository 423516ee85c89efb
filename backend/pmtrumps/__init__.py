import logging

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config
from pmtrumps.connections import ConnectionRegistry
from pmtrumps.services.game import RoomRegistry

registry = RoomRegistry()
connections = ConnectionRegistry()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    level = str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper()
    flask_app.logger.setLevel(getattr(logging, level, logging.INFO))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    CORS(flask_app, origins=allowed_origins)

    # Loads the card catalog and seeds the shared random source
    registry.init_app(flask_app)
    connections.clear()

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from pmtrumps.main import main
    flask_app.register_blueprint(main)

    from pmtrumps.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/rooms')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from pmtrumps.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('catalog-check')
    def catalog_check_command():
        """Loads the configured card CSV and lists the playable cards."""
        from pmtrumps.services.game.catalog import STAT_LABELS, load_catalog
        cards = load_catalog(flask_app.config['CARDS_CSV_PATH'])
        for card in cards:
            click.echo(f"{card.name} ({card.image})")
        click.echo(f"{len(cards)} playable cards; statistics: {', '.join(STAT_LABELS)}")

    flask_app.cli.add_command(catalog_check_command)

    flask_app.logger.info(
        f"[startup] cards={len(registry.catalog)} max_players={registry.max_players} "
        f"seeded={flask_app.config.get('SHUFFLE_SEED') is not None}"
    )
    return flask_app
