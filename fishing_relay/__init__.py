import os

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from fishing_relay.config import Config

socketio = SocketIO(async_mode=None)


class Relay:
    """Per-app relay state, stored in ``app.extensions['fishing_relay']``."""

    def __init__(self, directory, registry, dispatcher, reaper):
        self.directory = directory
        self.registry = registry
        self.dispatcher = dispatcher
        self.reaper = reaper


def _parse_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def _static_folder(config_class):
    folder = getattr(config_class, 'STATIC_FOLDER', 'public')
    if os.path.isabs(folder):
        return folder
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..', folder))


def create_app(config_class=Config):
    flask_app = Flask(__name__, static_folder=_static_folder(config_class), static_url_path='')
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _parse_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from fishing_relay.dispatcher import RelayDispatcher
    from fishing_relay.reaper import IdleReaper
    from fishing_relay.registry import ConnectionRegistry
    from fishing_relay.rooms import RoomDirectory

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')

    def emit(event, data=None, to=None):
        socketio.emit(event, data, to=to, namespace=namespace)

    def schedule(delay_sec, fn, *args):
        def _runner():
            socketio.sleep(delay_sec)
            fn(*args)
        socketio.start_background_task(_runner)

    directory = RoomDirectory(emit, max_players=flask_app.config.get('MAX_PLAYERS_PER_ROOM', 4))
    registry = ConnectionRegistry()
    dispatcher = RelayDispatcher(
        directory, registry, emit,
        schedule=schedule,
        fish_spawn_ttl_sec=flask_app.config.get('FISH_SPAWN_TTL_SEC', 30),
    )
    reaper = IdleReaper(
        directory,
        retention_ms=flask_app.config.get('ROOM_RETENTION_MS', 300000),
        interval_sec=flask_app.config.get('REAPER_INTERVAL_SEC', 60),
        lock=dispatcher.lock,
    )
    flask_app.extensions['fishing_relay'] = Relay(directory, registry, dispatcher, reaper)

    from fishing_relay.routes import main
    flask_app.register_blueprint(main)

    from fishing_relay.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    # Reaper stays off in tests unless explicitly enabled
    if not flask_app.config.get('TESTING') or flask_app.config.get('ENABLE_REAPER_IN_TESTS'):
        reaper.start()

    return flask_app
