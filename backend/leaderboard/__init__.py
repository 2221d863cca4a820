from flask import Flask
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_session import Session
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy
from werkzeug.middleware.proxy_fix import ProxyFix
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
server_session = Session()
socketio = SocketIO(async_mode=None)

DEMO_PLAYERS = [('Ada', 42), ('Grace', 37), ('Linus', 21)]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    if flask_app.config.get('TRUST_PROXY'):
        flask_app.wsgi_app = ProxyFix(flask_app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    # Session records live in the app database; logout deletes the row
    flask_app.config.setdefault('SESSION_TYPE', 'sqlalchemy')
    flask_app.config['SESSION_SQLALCHEMY'] = db
    # The session table is declared on db.metadata per app; drop an earlier app's copy
    session_table = db.metadata.tables.get(flask_app.config.get('SESSION_SQLALCHEMY_TABLE', 'sessions'))
    if session_table is not None:
        db.metadata.remove(session_table)
    server_session.init_app(flask_app)
    CORS(
        flask_app,
        supports_credentials=True,
        origins=allowed_origins,
        methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS'],
        allow_headers=['Content-Type', 'Authorization'],
    )
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One bus per app; resolvers get it passed in rather than importing it
    from leaderboard.api import EVENT_BUS_KEY, api
    from leaderboard.events import EventBus
    flask_app.extensions[EVENT_BUS_KEY] = EventBus()
    flask_app.register_blueprint(api)

    # Binds the Flask-Login user loader
    from leaderboard import auth  # noqa: F401

    from leaderboard.subscriptions import register_socketio_handlers
    register_socketio_handlers(flask_app)

    from leaderboard.access_log import init_access_log
    init_access_log(flask_app)

    @click.command('db-reset')
    @click.option('--seed', is_flag=True, help='Insert a few demo players.')
    def db_reset_command(seed):
        """Drops and recreates the database, optionally seeding players."""
        from leaderboard.models import Player
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            if seed:
                for name, score in DEMO_PLAYERS:
                    db.session.add(Player(name=name, score=score))
                db.session.commit()
            click.echo('Database has been reset' + (' and seeded!' if seed else '!'))

    flask_app.cli.add_command(db_reset_command)

    return flask_app
