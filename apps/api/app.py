"""
Citizenly - Flask API Application
Main application entry point
"""
import sys
import os
import json
from pathlib import Path
from dotenv import load_dotenv

# Determine project root (2 levels up from this file)
API_DIR = Path(__file__).parent.resolve()
PROJECT_ROOT = API_DIR.parent.parent.resolve()

# Load environment variables from .env file at project root
env_path = PROJECT_ROOT / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Add project root to path for absolute imports
sys.path.insert(0, str(PROJECT_ROOT))

from flask import Flask, jsonify
from flask_cors import CORS

from apps.api.config import Config
from apps.api import db, migrate, jwt, limiter


def create_app(config_class=Config):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    db_url = app.config.get('SQLALCHEMY_DATABASE_URI', '')
    if 'postgresql' in db_url:
        app.logger.info("Database: PostgreSQL (Supabase)")
    elif 'sqlite' in db_url:
        app.logger.info("Database: SQLite (local)")

    config_class.init_app(app)

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # Flask-Limiter honours RATELIMIT_ENABLED itself
    limiter.init_app(app)
    if app.config.get('RATELIMIT_ENABLED', True):
        app.logger.info("Rate limiting enabled")
    else:
        app.logger.warning("Rate limiting is DISABLED - not recommended for production")

    # Models must be imported before the hooks reference them
    from apps.api import models  # noqa: F401
    from apps.api.utils.sectoral_hooks import register_sectoral_hooks
    register_sectoral_hooks()

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses."""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        if not app.config.get('DEBUG'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        # Never leak raw exception details in non-debug environments.
        if not app.config.get('DEBUG') and response.status_code >= 400 and response.is_json:
            payload = response.get_json(silent=True)
            if isinstance(payload, dict) and 'details' in payload:
                payload.pop('details', None)
                response.set_data(json.dumps(payload))
                response.headers['Content-Type'] = 'application/json'

        return response

    # CORS: explicit origins only (credentials are allowed)
    cors_origins = []
    is_production = (app.config.get('FLASK_ENV') == 'production') and not app.config.get('DEBUG')

    web_url = (app.config.get('WEB_URL') or '').strip()
    if web_url:
        cors_origins.append(web_url)

    extra_origins = (os.getenv('CORS_ALLOWED_ORIGINS') or '').split(',')
    cors_origins.extend([o.strip() for o in extra_origins if o.strip()])

    if not is_production:
        cors_origins.extend([
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ])

    cors_origins = [origin for origin in dict.fromkeys(cors_origins) if origin]

    if is_production and not cors_origins:
        raise RuntimeError(
            "CORS configuration error: set WEB_URL or CORS_ALLOWED_ORIGINS in production."
        )

    CORS(app,
         origins=cors_origins,
         methods=["GET", "POST", "PUT", "PATCH", "OPTIONS"],
         allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
         supports_credentials=True,
         expose_headers=["Content-Type", "Authorization"])

    # Register blueprints
    from apps.api.routes import residents_bp, sectoral_bp, admin_bp

    app.register_blueprint(residents_bp)
    app.register_blueprint(sectoral_bp)
    app.register_blueprint(admin_bp)

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint for monitoring"""
        return jsonify({
            'status': 'ok',
            'service': 'Citizenly API',
            'version': '1.0.0'
        }), 200

    @app.route('/health/db', methods=['GET'])
    def db_health_check():
        """Health check endpoint that tests database connectivity"""
        import time
        from sqlalchemy import text
        from sqlalchemy.exc import SQLAlchemyError

        start = time.time()
        try:
            db.session.execute(text('SELECT 1')).fetchone()
            db.session.rollback()
            elapsed = time.time() - start
            return jsonify({
                'status': 'healthy',
                'database': 'connected',
                'latency_ms': round(elapsed * 1000, 2),
            }), 200
        except SQLAlchemyError as e:
            elapsed = time.time() - start
            app.logger.error("Database health check failed: %s", e)
            return jsonify({
                'status': 'unhealthy',
                'database': 'disconnected',
                'latency_ms': round(elapsed * 1000, 2),
                'details': str(e)[:200]
            }), 503

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Resource not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'error': 'Internal server error'}), 500

    @app.errorhandler(401)
    def unauthorized(error):
        return jsonify({'error': 'Unauthorized'}), 401

    @app.errorhandler(403)
    def forbidden(error):
        return jsonify({'error': 'Forbidden'}), 403

    # Flask-Limiter rate limit handler (ensure JSON, not HTML)
    from flask_limiter.errors import RateLimitExceeded

    @app.errorhandler(RateLimitExceeded)
    def ratelimit_handler(error):  # pragma: no cover
        payload = {'error': 'Rate limit exceeded'}
        desc = getattr(error, 'description', None)
        if desc:
            payload['details'] = str(desc)
        resp = jsonify(payload)
        resp.status_code = 429
        return resp

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=app.config['DEBUG']
    )
