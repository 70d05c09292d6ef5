"""Classroom Attendance Tracker - Application Factory."""
import logging
import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


def create_app(config_name: str = None) -> Flask:
    """Application factory pattern."""
    app = Flask(__name__)

    # Load configuration
    from attendance_tracker.config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Configure CORS
    CORS(app, origins=app.config.get('CORS_ORIGINS', ["*"]), supports_credentials=True)

    # Setup logging
    setup_logging(app)

    # Route ids are bounded to what the id columns hold
    from attendance_tracker.utils.validators import IdConverter
    app.url_map.converters['id'] = IdConverter

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Identity loading for flask-jwt-extended
    register_jwt_callbacks()

    # Add CLI commands
    register_commands(app)

    @app.route('/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'service': 'Attendance Tracker',
            'version': '1.0.0'
        })

    return app


def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    from attendance_tracker.api.auth import auth_bp
    from attendance_tracker.api.users import users_bp
    from attendance_tracker.api.sessions import sessions_bp
    from attendance_tracker.api.attendance import attendance_bp
    from attendance_tracker.api.exports import exports_bp

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(sessions_bp, url_prefix='/api/sessions')
    app.register_blueprint(attendance_bp, url_prefix='/api/attendance')
    app.register_blueprint(exports_bp, url_prefix='/api/export')


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from werkzeug.exceptions import HTTPException
    from attendance_tracker.utils.errors import (
        AttendanceTrackerError, PersistenceError, ValidationError
    )
    from attendance_tracker.utils.helpers import handle_error

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return handle_error(error, 400, errors=error.errors)

    @app.errorhandler(PersistenceError)
    def persistence_error(error):
        # Already logged with context where it was raised
        return handle_error('Internal server error', 500)

    @app.errorhandler(AttendanceTrackerError)
    def domain_error(error):
        return handle_error(error, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_exception(e):
        return handle_error(e, e.code)

    @app.errorhandler(Exception)
    def internal_error(error):
        db.session.rollback()
        app.logger.exception('Unhandled error: %s', error)
        return handle_error('Internal server error', 500)


def register_jwt_callbacks() -> None:
    """Wire flask-jwt-extended identity and error callbacks."""
    from attendance_tracker.models.user import User

    @jwt.user_lookup_loader
    def user_lookup_callback(_jwt_header, jwt_data):
        user = db.session.get(User, int(jwt_data['sub']))
        if user is None or not user.is_enabled():
            return None
        return user

    @jwt.user_lookup_error_loader
    def user_lookup_error_callback(_jwt_header, jwt_data):
        return jsonify({
            'error': True,
            'message': 'Unauthorized',
            'status_code': 401
        }), 401

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({
            'error': True,
            'message': 'Token has expired',
            'status_code': 401
        }), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({
            'error': True,
            'message': 'Invalid token',
            'status_code': 401
        }), 401

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return jsonify({
            'error': True,
            'message': 'Unauthorized',
            'status_code': 401
        }), 401


def setup_logging(app: Flask) -> None:
    """Setup application logging."""
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    if not app.debug and not app.testing:
        log_file = app.config.get('LOG_FILE', 'logs/app.log')
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        app.logger.info('Attendance Tracker startup')


def register_commands(app: Flask) -> None:
    """Register CLI commands."""
    import click

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables')
    def init_db(drop):
        """Initialize the database."""
        from attendance_tracker.services.seed_service import SeedService

        if drop:
            db.drop_all()
            click.echo('Dropped all tables.')

        db.create_all()
        click.echo('Created all tables.')

        admin = SeedService.ensure_admin()
        click.echo(f'Admin user ready: {admin.username}')

    @app.cli.command('seed-db')
    def seed_db():
        """Seed database with demo students."""
        from attendance_tracker.services.seed_service import SeedService

        created = SeedService.seed_all()
        click.echo(f'Database seeded: {len(created)} students created.')

    @app.cli.command('create-admin')
    def create_admin():
        """Create admin user."""
        from attendance_tracker.services.user_service import UserService

        username = click.prompt('Admin username')
        name = click.prompt('Admin name')
        email = click.prompt('Admin email')
        password = click.prompt('Password', hide_input=True, confirmation_prompt=True)

        admin = UserService.create_user(
            username=username,
            password=password,
            name=name,
            email=email,
            role='admin'
        )
        click.echo(f'Admin user created: {admin.username}')
