"""
Creaparty - Event Furniture Rental Storefront and Back Office
Flask application factory and initialization
"""

import os
import sqlite3
import click
import logging
from flask import Flask, g
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from config import config
from extensions import login_manager, csrf
from database import close_db, init_db

LOG_FILE = 'logs/creaparty.log'


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    config_class = config[config_name]
    if config_name == 'production':
        config_class.validate()

    app = Flask(__name__)
    app.config.from_object(config_class)

    # SQLite will not create missing parent directories
    db_dir = os.path.dirname(app.config['DATABASE_PATH'])
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)

    login_manager.init_app(app)
    csrf.init_app(app)

    register_blueprints(app)
    register_error_handlers(app)
    register_cli_commands(app)
    register_hooks(app)
    configure_logging(app)

    return app


def register_blueprints(app):
    """Mount the storefront API, the back office and auth."""
    from blueprints.auth.routes import auth_bp
    from blueprints.public import public_bp
    from blueprints.admin import admin_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(public_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/admin')


def register_error_handlers(app):
    """Every error leaves the app as a JSON envelope."""
    from utils.api_response import api_error
    from utils.exceptions import RentalError, PersistenceError
    from utils.messages import MESSAGES

    @app.errorhandler(RentalError)
    def rental_error(error):
        if isinstance(error, PersistenceError):
            app.logger.error(f'Persistence failure: {error.detail}')
        return api_error(error.message, status=error.status, code=error.code, **error.extra())

    @app.errorhandler(404)
    def not_found_error(error):
        return api_error(MESSAGES['not_found'], status=404)

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return api_error(MESSAGES['method_not_allowed'], status=405)

    @app.errorhandler(500)
    def internal_error(error):
        """Roll back the request's open transaction before answering."""
        db = g.get('db')
        if db:
            db.rollback()
        return api_error(MESSAGES['internal_error'], status=500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('create-user')
    @click.argument('username')
    @click.argument('email')
    @click.option('--full-name', default=None, help='Display name for the back office')
    @click.password_option()
    def create_user_command(username, email, full_name, password):
        """Create a back office administrator."""
        from models.user import create_user

        with app.app_context():
            try:
                user_id = create_user(username=username, email=email,
                                      password=password, full_name=full_name)
            except sqlite3.IntegrityError:
                raise click.ClickException(f'User {username} or email {email} already exists')
        click.echo(f'User created successfully! ID: {user_id}')

    @app.cli.command('send-reminders')
    @click.option('--days', type=int, default=None,
                  help='Days ahead of the event (defaults to REMINDER_DAYS_AHEAD)')
    def send_reminders_command(days):
        """Send event reminders for confirmed reservations."""
        from blueprints.admin.services.reservation_service import send_event_reminders

        with app.app_context():
            days_ahead = days if days is not None else app.config['REMINDER_DAYS_AHEAD']
            sent, total = send_event_reminders(days_ahead)
        click.echo(f'Reminders sent: {sent}/{total}')


def register_hooks(app):
    """Notification hooks and per-request database teardown."""
    from utils.notifications import register_default_hooks

    register_default_hooks()

    @app.teardown_appcontext
    def teardown_db(error):
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if app.debug or app.testing:
        app.logger.setLevel(logging.DEBUG)
        return

    os.makedirs('logs', exist_ok=True)
    root_logger = logging.getLogger()
    log_path = os.path.abspath(LOG_FILE)
    if any(getattr(h, 'baseFilename', None) == log_path for h in root_logger.handlers):
        # Factory called again in the same process
        app.logger.setLevel(logging.INFO)
        return

    file_handler = logging.FileHandler(LOG_FILE)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s %(name)s: %(message)s [in %(pathname)s:%(lineno)d]'
    ))
    file_handler.setLevel(logging.INFO)

    # Module loggers (utils.notifications, models.stock) share the handler
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.INFO)

    app.logger.setLevel(logging.INFO)
    app.logger.info('Creaparty startup')


# Development server
if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', debug=True)
