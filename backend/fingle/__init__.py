from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Collaborators live on the app so tests and deployments can swap them
    from fingle.services.notifications import SocketIONotifier
    from fingle.services.photos import LocalPhotoStore
    flask_app.extensions['fingle.notifier'] = SocketIONotifier(socketio)
    flask_app.extensions['fingle.photo_store'] = LocalPhotoStore(
        flask_app.config['PHOTO_UPLOAD_DIR'], flask_app.config['PHOTO_BASE_URL']
    )

    # Import and register blueprints here
    from fingle.main import main
    flask_app.register_blueprint(main, url_prefix='/api')

    from fingle.api.challenges import challenges
    flask_app.register_blueprint(challenges, url_prefix='/api/challenges')

    from fingle.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard, url_prefix='/api/leaderboard')

    from fingle.errors import GameError

    @flask_app.errorhandler(GameError)
    def handle_game_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(413)
    def handle_too_large(exc):
        return jsonify({'error': 'Photo exceeds the upload size limit'}), 413

    # Socket.IO connection registry
    from fingle.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    # Flask-Login user loader; sessions are issued by the identity service
    from fingle.models import User

    @login_manager.user_loader
    def load_user(user_id):
        user = db.session.get(User, int(user_id))
        if user is None or user.is_banned:
            return None
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Authentication required'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from fingle.models import Friendship, FriendshipStatus
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed two players who are already friends
            alice = User(username='alice', email='alice@fingle.app', email_verified=True)
            bob = User(username='bob', email='bob@fingle.app', email_verified=True)
            db.session.add_all([alice, bob])
            db.session.flush()
            db.session.add(Friendship(
                initiator_id=alice.id,
                receiver_id=bob.id,
                status=FriendshipStatus.ACCEPTED.value,
            ))

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
