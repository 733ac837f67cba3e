from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Bind the session core: store, broadcast gateway, manager
    from buzzboard.services.sessions import (
        BroadcastGateway, MemorySessionStore, SessionManager, SqlSessionStore,
    )
    backend = flask_app.config.get('SESSION_STORE', 'sql')
    if backend == 'memory':
        store = MemorySessionStore()
    elif backend == 'sql':
        store = SqlSessionStore()
    else:
        raise ValueError(f"Unknown SESSION_STORE {backend!r}")
    gateway = BroadcastGateway(socketio, namespace='/ws')
    flask_app.extensions['session_manager'] = SessionManager.from_config(flask_app.config, store, gateway)

    # Import and register blueprints here
    from buzzboard.main import main
    flask_app.register_blueprint(main)

    from buzzboard.api.sessions import sessions
    # Mount game routes under /api/game to match the frontend API client
    flask_app.register_blueprint(sessions, url_prefix='/api/game')

    # Register Socket.IO event handlers
    from buzzboard.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    # Ensure the table is known to Flask-Migrate and db.create_all
    import buzzboard.models  # noqa: F401

    @click.command('purge-expired')
    def purge_expired_command():
        """Deletes sessions whose time-to-live has run out."""
        with flask_app.app_context():
            removed = get_session_manager().store.purge_expired()
            print(f'Purged {removed} expired session(s).')

    flask_app.cli.add_command(purge_expired_command)

    flask_app.logger.info(f"[startup] session store={backend}")
    return flask_app


def get_session_manager():
    return current_app.extensions['session_manager']
