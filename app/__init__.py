"""
GigPack Application Factory.
Creates and configures the Flask application instance.
"""
import os
import json
import logging
import uuid
from datetime import datetime, timezone

import click
from flask import Flask, jsonify, request, g

from app.config import config
from app.extensions import init_extensions, db


def _init_sentry(app):
    """Initialize Sentry error tracking for production."""
    dsn = app.config.get('SENTRY_DSN') or os.environ.get('SENTRY_DSN')
    if not dsn:
        app.logger.info('SENTRY_DSN not set: error tracking disabled.')
        return

    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=dsn,
            integrations=[FlaskIntegration(), SqlalchemyIntegration()],
            traces_sample_rate=float(os.environ.get('SENTRY_TRACES_RATE', '0.1')),
            environment=os.environ.get('FLASK_ENV', 'production'),
            send_default_pii=False,
        )
        app.logger.info('Sentry error tracking initialized.')
    except ImportError:
        app.logger.warning('sentry-sdk not installed: error tracking disabled.')


def create_app(config_name=None):
    """
    Application factory for creating Flask app instances.

    Args:
        config_name: Configuration to use (development, testing, production)

    Returns:
        Configured Flask application instance
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)

    # Load configuration
    config_class = config[config_name]
    app.config.from_object(config_class)

    # Initialize Sentry (production only)
    if config_name == 'production':
        _init_sentry(app)

    # Call init_app if available (production validation happens here)
    if hasattr(config_class, 'init_app'):
        config_class.init_app(app)

    # Initialize extensions
    init_extensions(app)

    # Import models so metadata is complete for create_all / migrations
    from app import models  # noqa: F401

    register_blueprints(app)
    register_error_handlers(app)
    register_cli_commands(app)
    configure_logging(app)
    register_security_headers(app)

    # Create database tables (development only)
    if config_name == 'development':
        with app.app_context():
            db.create_all()

    return app


def register_blueprints(app):
    """Register all application blueprints."""
    from app.blueprints.api import api_bp

    app.register_blueprint(api_bp, url_prefix='/api/v1')


def _error(code, message, status, **extra):
    body = {'error': {'code': code, 'message': message}}
    body['error'].update(extra)
    return jsonify(body), status


def register_error_handlers(app):
    """Register JSON error handlers for common HTTP errors."""

    @app.errorhandler(403)
    def forbidden(error):
        return _error('forbidden', 'Access denied.', 403)

    @app.errorhandler(404)
    def not_found(error):
        return _error('not_found', 'Resource not found.', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _error('method_not_allowed', 'Method not allowed.', 405)

    @app.errorhandler(429)
    def ratelimit_error(error):
        return _error('rate_limit_exceeded', 'Too many requests. Try again later.', 429)

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        request_id = g.get('request_id', '-')
        app.logger.error('500 Internal Server Error: %s (request_id=%s)', type(error).__name__, request_id, exc_info=True)
        return _error('internal_error', 'Internal server error.', 500, request_id=request_id)


def register_cli_commands(app):
    """Register custom CLI commands."""

    @app.cli.command('init-db')
    def init_db():
        """Create all database tables."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('create-share')
    @click.argument('gig_id', type=int)
    @click.option('--expires-in-days', type=int, default=None, help='Days until the link expires')
    def create_share(gig_id, expires_in_days):
        """Issue a public share link for a gig."""
        from app.services.gigpack_service import GigNotFoundError
        from app.services.share_service import ShareService

        try:
            share = ShareService.create_share(gig_id, expires_in_days=expires_in_days)
        except GigNotFoundError as e:
            raise click.ClickException(str(e))

        base_url = app.config.get('APP_URL', '').rstrip('/')
        click.echo(f'{base_url}/api/v1/public/gigpacks/{share.token}')

    @app.cli.command('revoke-share')
    @click.argument('token')
    def revoke_share(token):
        """Deactivate a share link."""
        from app.services.share_service import ShareService

        if ShareService.revoke_share(token) is None:
            raise click.ClickException('Share not found.')
        click.echo('Share revoked.')

    @app.cli.command('issue-token')
    @click.argument('profile_id', type=int)
    @click.option('--expires-minutes', type=int, default=60, help='Token lifetime')
    def issue_token(profile_id, expires_minutes):
        """Print an API access token for a profile."""
        from app.blueprints.api.decorators import create_access_token
        from app.models.profile import Profile

        if db.session.get(Profile, profile_id) is None:
            raise click.ClickException(f'Profile {profile_id} not found.')
        click.echo(create_access_token(profile_id, expires_minutes=expires_minutes))


class JSONFormatter(logging.Formatter):
    """JSON log formatter for production (Render, cloud platforms)."""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'module': record.module,
            'line': record.lineno,
        }
        # Add request_id if available
        try:
            log_entry['request_id'] = g.get('request_id', '-')
        except RuntimeError:
            pass  # Outside request context
        if record.exc_info and record.exc_info[0]:
            log_entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def configure_logging(app):
    """Configure application logging.

    Production: JSON to stdout (for cloud log aggregation).
    Development: plain text.
    """
    if app.testing:
        return

    # Request ID middleware
    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get('X-Request-ID', str(uuid.uuid4())[:8])

    @app.after_request
    def log_request(response):
        app.logger.info('%s %s %s', request.method, request.path, response.status_code)
        return response

    if not app.debug:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(JSONFormatter())
        stream_handler.setLevel(logging.INFO)

        # Clear existing handlers to avoid duplicates
        app.logger.handlers.clear()
        app.logger.addHandler(stream_handler)
        app.logger.setLevel(logging.INFO)
        app.logger.info('GigPack startup (JSON logging)')
    else:
        app.logger.setLevel(logging.DEBUG)
        app.logger.info('GigPack startup (development)')


def register_security_headers(app):
    """Register security headers for all responses."""

    @app.after_request
    def add_security_headers(response):
        # Prevent MIME type sniffing
        response.headers['X-Content-Type-Options'] = 'nosniff'

        # API responses are never framed
        response.headers['X-Frame-Options'] = 'DENY'

        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers['Permissions-Policy'] = 'geolocation=(), microphone=(), camera=()'

        # HSTS - Force HTTPS (1 year, include subdomains)
        if not app.debug:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        response.headers['X-Permitted-Cross-Domain-Policies'] = 'none'
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none';"

        return response
