from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData
from flask_migrate import Migrate
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_principal import Principal


# 1. Create extension instances WITHOUT an app
# They will be "connected" to the app inside the factory

# Define naming convention for SQLAlchemy
convention = {
    "ix": 'ix_%(column_0_label)s',
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}
metadata = MetaData(naming_convention=convention)

db = SQLAlchemy(metadata=metadata)
bcrypt = Bcrypt()
migrate = Migrate()
login_manager = LoginManager()

# Identities come from the bearer token on every request, never from the session
principal = Principal(use_sessions=False)


def create_app(config_class='config.Config'):
    """
    Application Factory Function
    """

    app = Flask(__name__)

    # Load configuration from the config.py file
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Converters have to exist before any blueprint adds its rules
    from .utils import IdConverter
    app.url_map.converters['id'] = IdConverter

    db.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    principal.init_app(app)

    # Set up identity loader for Flask-Principal
    from flask_login import current_user
    from flask_principal import Identity, UserNeed, identity_loaded

    @principal.identity_loader
    def load_identity_from_token():
        if current_user.is_authenticated:
            return Identity(current_user.id, auth_type='bearer')
        return None

    @identity_loaded.connect_via(app)
    def on_identity_loaded(sender, identity):
        """Expose the principal to permission checks as a UserNeed."""
        identity.user = current_user
        if current_user.is_authenticated:
            identity.provides.add(UserNeed(current_user.id))

    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register Blueprints
    # Imports are *inside* the factory to avoid circular import issues
    with app.app_context():
        from .auth import auth_bp
        from .users_routes import users_bp
        from .clubs_routes import clubs_bp

        # Import models so SQLAlchemy knows about them
        from . import models
        from .models.base import configure_engine
        configure_engine(
            db.engine,
            statement_timeout_ms=app.config.get('DB_STATEMENT_TIMEOUT_MS', 0),
            sqlite_busy_timeout_ms=app.config.get('SQLITE_BUSY_TIMEOUT_MS', 0),
        )

        app.register_blueprint(auth_bp, url_prefix='/api/auth')
        app.register_blueprint(users_bp, url_prefix='/api/users')
        app.register_blueprint(clubs_bp, url_prefix='/api/clubs')

    # Register CLI commands
    from clubhub.commands.create_club import create_club
    from clubhub.commands.init_db import init_db

    app.cli.add_command(create_club)
    app.cli.add_command(init_db)

    return app


def shutdown_db(app):
    """Release every pooled connection held by this app's engine."""
    with app.app_context():
        db.engine.dispose()
