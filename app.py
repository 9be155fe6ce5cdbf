import os

import click
from flask import Flask, jsonify, request
from flask_login import current_user

from config import Config, ProductionConfig, DevelopmentConfig, TestingConfig

# Import extensions to avoid circular imports
from extensions import db, migrate, login_manager, csrf

# Import models so their tables are registered before create_all
from models import Staff
from error_handler import register_error_handlers

CSRF_METHODS = ['POST', 'PUT', 'PATCH', 'DELETE']
# The public intake form is submitted without a staff session
CSRF_EXEMPT_ENDPOINTS = ['api.public.submit_form']


def create_app(config_class=None):
    """
    Factory function to create the Flask application.
    Automatically selects configuration based on environment.
    """
    if config_class is None:
        # Auto-detect environment and select appropriate config
        env = os.environ.get('FLASK_ENV', 'production').lower()
        if env == 'development':
            config_class = DevelopmentConfig
        elif env == 'testing':
            config_class = TestingConfig
        else:
            config_class = ProductionConfig  # Default to production for security

    app = Flask(__name__)
    app.config.from_object(config_class)
    if app.config['SECRET_KEY'] == Config.SECRET_KEY and not app.config.get('TESTING'):
        app.logger.warning("SECRET_KEY is not set; using the built-in development key")

    # Initialize extensions with the app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)

    # Initialize database schema
    with app.app_context():
        try:
            db.create_all()
            app.logger.info("Database tables created successfully")
        except Exception as e:
            app.logger.error(f"FATAL DATABASE ERROR DURING INITIALIZATION: {e}")
            raise

    # User loader function for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(Staff, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'message': 'Unauthorized'}), 401

    # Import and register blueprints
    from authroutes import auth_blueprint
    from api_routes import api_blueprint

    app.register_blueprint(auth_blueprint, url_prefix='/auth')
    app.register_blueprint(api_blueprint, url_prefix='/api')

    register_error_handlers(app)

    @app.before_request
    def protect_form_posts():
        # Form-encoded writes must carry the session CSRF token
        if not app.config.get('WTF_CSRF_ENABLED', True):
            return None
        if request.method not in app.config.get('WTF_CSRF_METHODS', CSRF_METHODS):
            return None
        if request.is_json or request.endpoint in CSRF_EXEMPT_ENDPOINTS:
            return None
        csrf.protect()
        return None

    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        return response

    @app.route('/')
    def home():
        return jsonify({
            'success': True,
            'app': 'ministry-tracker',
            'authenticated': current_user.is_authenticated,
        })

    @app.cli.command('seed')
    def seed_command():
        """Load sample staff, students and records into an empty database."""
        from services.sample_data import ADMIN_CREDENTIALS, seed_database

        summary = seed_database()
        if summary is None:
            click.echo("Database already seeded.")
            return
        click.echo(f"Database seeded: {summary}")
        click.echo(f"Admin login: {ADMIN_CREDENTIALS['email']} / {ADMIN_CREDENTIALS['password']}")

    return app
