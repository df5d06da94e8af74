from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3998",
    "http://127.0.0.1:3998",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

from whowrote.store import GameStore  # noqa: E402  (needs db above)

game_store = GameStore()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    game_store.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from whowrote.main import main
    flask_app.register_blueprint(main, url_prefix='/api')

    from whowrote.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api')

    from whowrote.api.admin import admin
    flask_app.register_blueprint(admin, url_prefix='/api/admin')

    from whowrote.errors import register_error_handlers
    register_error_handlers(flask_app)

    from whowrote.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from whowrote.auth import Account

    @login_manager.user_loader
    def load_user(user_id):
        return Account.from_session_id(user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Not logged in'}), 401

    @click.command('game-reset')
    def game_reset_command():
        """Wipes the game back to an empty registration phase."""
        from whowrote.models import GameState
        with flask_app.app_context():
            game_store.replace(GameState())
        print('Game has been reset to phase 1!')

    @click.command('game-status')
    def game_status_command():
        """Prints the current phase and how many entries exist."""
        with flask_app.app_context():
            state = game_store.load()
        print(f'phase={state.phase} users={len(state.users)} '
              f'sentences={len(state.sentences)} guesses={len(state.guesses)}')

    flask_app.cli.add_command(game_reset_command)
    flask_app.cli.add_command(game_status_command)

    return flask_app
