import os

from dotenv import load_dotenv

load_dotenv()


def get_database_url():
    """DATABASE_URL with the legacy postgres:// scheme SQLAlchemy no longer accepts."""
    database_url = os.environ.get('DATABASE_URL')
    if database_url and database_url.startswith('postgres://'):
        database_url = database_url.replace('postgres://', 'postgresql://', 1)
    return database_url


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'a-very-secret-key'

    # CSRF Protection
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600  # 1 hour
    # Checked for form-encoded bodies only, in create_app
    WTF_CSRF_CHECK_DEFAULT = False

    INSTANCE_FOLDER = os.path.join(os.path.abspath(os.path.dirname(__file__)), 'instance')

    # Prioritize the production DATABASE_URL, with SQLite as a fallback.
    SQLALCHEMY_DATABASE_URI = get_database_url() or \
        'sqlite:///' + os.path.join(INSTANCE_FOLDER, 'app.db')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Debug mode - only enable in development environment
    DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # Required as ?secret= on the seed endpoint when set
    SEED_SECRET = os.environ.get('SEED_SECRET')

    # Default page size for the student roster
    STUDENTS_PAGE_LIMIT = int(os.environ.get('STUDENTS_PAGE_LIMIT', 20))

    # Max request body size (e.g., 2MB)
    MAX_CONTENT_LENGTH = 2 * 1024 * 1024

    # Ensure the SQLite folder exists
    if not os.path.exists(INSTANCE_FOLDER):
        os.makedirs(INSTANCE_FOLDER)


class ProductionConfig(Config):
    """Production configuration with enhanced security."""
    DEBUG = False  # Always False in production
    TESTING = False

    SESSION_COOKIE_SECURE = True  # Only send cookies over HTTPS
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 3600  # 1 hour session timeout


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = True
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'  # In-memory database for tests
    WTF_CSRF_ENABLED = False
    SEED_SECRET = None
