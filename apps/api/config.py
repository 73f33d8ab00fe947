"""
Citizenly - Configuration
Application configuration management
"""
import os
import logging
from datetime import timedelta
from pathlib import Path
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse

# Monorepo layout: <repo>/apps/api/config.py -> BASE_DIR=<repo>
_THIS_DIR = Path(__file__).parent.resolve()
_MONOREPO_ROOT = _THIS_DIR.parent.parent
if (_MONOREPO_ROOT / 'apps' / 'api').exists():
    BASE_DIR = _MONOREPO_ROOT.resolve()
else:
    BASE_DIR = _THIS_DIR


def _require_env(name: str, default: str = None, allow_default_in_dev: bool = True) -> str:
    """
    Get environment variable, failing loudly in production if not set.

    Args:
        name: Environment variable name
        default: Default value (only used in development)
        allow_default_in_dev: Whether to allow default in development mode

    Returns:
        The environment variable value

    Raises:
        RuntimeError: If variable is not set in production
    """
    value = os.getenv(name)
    is_production = os.getenv('FLASK_ENV', 'development') == 'production'

    if value:
        return value

    if is_production:
        if default is None or name in ('SECRET_KEY', 'JWT_SECRET_KEY'):
            raise RuntimeError(
                f"SECURITY ERROR: {name} environment variable is required in production."
            )
        logging.warning("Using default value for %s in production - consider setting explicitly", name)
        return default

    if default is not None and allow_default_in_dev:
        logging.debug("Using default value for %s in development", name)
        return default

    raise RuntimeError(f"{name} environment variable is required")


def get_database_url():
    """
    Get and process the database URL.
    - Converts postgres:// to postgresql:// (SQLAlchemy requirement)
    - Ensures sslmode=require for PostgreSQL (required by Supabase)
    """
    url = os.getenv('DATABASE_URL')

    if not url:
        fallback = 'sqlite:///citizenly-dev.db'
        logging.warning("DATABASE_URL not set; using fallback %s", fallback)
        return fallback

    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)

    if url.startswith('postgresql://'):
        try:
            parsed = urlparse(url)
            query_params = parse_qs(parsed.query)
            if 'sslmode' not in query_params:
                query_params['sslmode'] = ['require']
            url = urlunparse((
                parsed.scheme,
                parsed.netloc,
                parsed.path,
                parsed.params,
                urlencode(query_params, doseq=True),
                parsed.fragment
            ))
        except ValueError as e:
            # Special characters in the password can break urlparse
            logging.warning("Could not parse DATABASE_URL: %s", e)
            if 'sslmode=' not in url:
                separator = '&' if '?' in url else '?'
                url = f"{url}{separator}sslmode=require"

    return url


def get_engine_options():
    """
    SQLAlchemy engine options for the configured database.

    The Supabase transaction pooler (port 6543) runs PgBouncer, so no
    client-side pooling is done there.
    """
    db_url = get_database_url()

    options = {
        'pool_pre_ping': True,
    }

    if db_url.startswith('postgresql://'):
        is_pooler = ':6543' in db_url or 'pooler.supabase.com' in db_url

        if is_pooler:
            from sqlalchemy.pool import NullPool
            options.update({
                'poolclass': NullPool,
                'connect_args': {
                    'connect_timeout': 30,
                    'keepalives': 1,
                    'keepalives_idle': 30,
                    'keepalives_interval': 10,
                    'keepalives_count': 5,
                    'options': '-c statement_timeout=60000',
                    'application_name': 'citizenly-api',
                }
            })
        else:
            options.update({
                'pool_recycle': 180,
                'pool_timeout': 20,
                'pool_size': 2,
                'max_overflow': 4,
                'connect_args': {
                    'connect_timeout': 20,
                    'keepalives': 1,
                    'keepalives_idle': 20,
                    'keepalives_interval': 5,
                    'keepalives_count': 3,
                    # Reconciliation batches run longer than request queries
                    'options': '-c statement_timeout=120000',
                }
            })

    if db_url.startswith('sqlite://'):
        from sqlalchemy.pool import NullPool
        options = {'poolclass': NullPool}

    return options


class Config:
    """Base configuration"""

    SECRET_KEY = _require_env('SECRET_KEY', 'dev-secret-key-for-local-development-only')
    DEBUG = os.getenv('DEBUG', 'False') == 'True'
    FLASK_ENV = os.getenv('FLASK_ENV', 'development')

    # Database
    SQLALCHEMY_DATABASE_URI = get_database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = DEBUG
    SQLALCHEMY_ENGINE_OPTIONS = get_engine_options()

    # Supabase (auth is issued by Supabase; this API only verifies the JWT)
    SUPABASE_URL = os.getenv('SUPABASE_URL', '')
    SUPABASE_KEY = os.getenv('SUPABASE_KEY', '')

    # JWT
    JWT_SECRET_KEY = _require_env('JWT_SECRET_KEY', 'jwt-dev-secret-for-local-development-only')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        seconds=int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', 3600))
    )
    JWT_ALGORITHM = 'HS256'
    JWT_TOKEN_LOCATION = ['headers']

    # Rate Limiting
    RATELIMIT_ENABLED = os.getenv('RATELIMIT_ENABLED', 'True') == 'True'
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    if FLASK_ENV == 'production' and RATELIMIT_ENABLED and RATELIMIT_STORAGE_URI.strip().lower() == 'memory://':
        raise RuntimeError(
            "RATELIMIT_STORAGE_URI must use a shared backend (e.g., Redis) in production."
        )
    RATELIMIT_HEADERS_ENABLED = True
    RECONCILE_RATE_LIMIT = os.getenv('RECONCILE_RATE_LIMIT', '5 per hour')

    # Sectoral classification
    SECTORAL_RECONCILE_BATCH_SIZE = int(os.getenv('SECTORAL_RECONCILE_BATCH_SIZE', 500))
    BARANGAY_TIMEZONE = os.getenv('BARANGAY_TIMEZONE', 'Asia/Manila')

    # Application
    APP_NAME = os.getenv('APP_NAME', 'Citizenly')
    WEB_URL = os.getenv('WEB_URL', 'http://localhost:3000')

    @staticmethod
    def init_app(app):
        """Initialize application configuration"""
        if app.config.get('SECTORAL_RECONCILE_BATCH_SIZE', 0) < 1:
            app.logger.warning(
                "SECTORAL_RECONCILE_BATCH_SIZE=%s is invalid; using 500",
                app.config.get('SECTORAL_RECONCILE_BATCH_SIZE'),
            )
            app.config['SECTORAL_RECONCILE_BATCH_SIZE'] = 500


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SQLALCHEMY_ECHO = False
    JWT_SECRET_KEY = 'test-secret'
    RATELIMIT_ENABLED = False


config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
