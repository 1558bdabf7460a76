from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import logging
import os

db = SQLAlchemy()

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    from config import config
    app.config.from_object(config.get(config_name, config['default']))

    from ecochain.middleware import RequestIdFilter, RequestIdMiddleware
    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s [%(name)s] [%(request_id)s] %(message)s',
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())

    # Initialize extensions
    from ecochain.extensions import limiter
    db.init_app(app)
    limiter.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    app.wsgi_app = RequestIdMiddleware(app.wsgi_app)

    from ecochain.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from ecochain.routes.auth import auth_bp
    from ecochain.routes.users import users_bp
    from ecochain.routes.pickups import pickups_bp
    from ecochain.routes.wallet import wallet_bp
    from ecochain.routes.leaderboard import leaderboard_bp
    from ecochain.routes.geocode import geocode_bp

    api_prefix = app.config['API_PREFIX']
    app.register_blueprint(auth_bp, url_prefix=f'{api_prefix}/auth')
    app.register_blueprint(users_bp, url_prefix=f'{api_prefix}/users')
    app.register_blueprint(pickups_bp, url_prefix=f'{api_prefix}/pickups')
    app.register_blueprint(wallet_bp, url_prefix=f'{api_prefix}/wallet')
    app.register_blueprint(leaderboard_bp, url_prefix=f'{api_prefix}/leaderboard')
    app.register_blueprint(geocode_bp, url_prefix=f'{api_prefix}/geocode')

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        return response

    # Health check endpoint
    @app.route('/health')
    @limiter.exempt
    def health():
        return jsonify({'status': 'healthy', 'service': 'ecochain-hub'}), 200

    from ecochain.cli import register_commands
    register_commands(app)

    if not app.config.get('TESTING'):
        with app.app_context():
            db.create_all()

        from ecochain.scheduler import init_scheduler
        app.extensions['ecochain_scheduler'] = init_scheduler(app)

    logger.debug('Application created with %s configuration', config_name)
    return app
