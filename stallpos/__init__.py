"""
Flask Application Factory
Initializes and configures the Flask application
"""

import os
from flask import Flask, jsonify
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException
from config import config
from stallpos.errors import PosError
from stallpos.models import db
from stallpos.services import build_services
from stallpos.storage import create_storage
from stallpos.utils.error_logger import log_error

# Initialize extensions
migrate = Migrate()


def create_app(config_name='default', settings=None, storage=None, clock=None):
    """
    Application factory pattern
    Creates and configures Flask application

    Args:
        config_name: Key into config.config
        settings: Optional dict of config overrides
        storage: Ready storage backend; built from the config when omitted
        clock: Callable returning the current datetime, for the services
    """
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    if settings:
        app.config.update(settings)
    app.json.sort_keys = False

    # Validate secret key in production
    if config_name == 'production':
        if not app.config.get('SECRET_KEY') or app.config['SECRET_KEY'] == 'dev-secret-key-change-in-production':
            raise ValueError("Production requires a secure SECRET_KEY. Set it via environment variable.")
        if len(app.config['SECRET_KEY']) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters for production.")

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    os.makedirs(app.config['LOG_FOLDER'], exist_ok=True)

    # Storage is chosen once, before any request is served
    if storage is None:
        storage = create_storage(app)
    app.extensions['stallpos'] = build_services(
        storage,
        clock=clock,
        default_biller=app.config['DEFAULT_BILLER_NAME'],
    )

    # Register blueprints
    from stallpos.routes.auth import bp as auth_bp
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    from stallpos.routes.catalog import bp as catalog_bp
    app.register_blueprint(catalog_bp, url_prefix='/api')

    from stallpos.routes.transactions import bp as transactions_bp
    app.register_blueprint(transactions_bp, url_prefix='/api/transactions')

    from stallpos.routes.summaries import bp as summaries_bp
    app.register_blueprint(summaries_bp, url_prefix='/api/summaries')

    from stallpos.routes.data import bp as data_bp
    app.register_blueprint(data_bp, url_prefix='/api')

    from stallpos.routes.inventory import bp as inventory_bp
    app.register_blueprint(inventory_bp, url_prefix='/api/inventory')

    @app.route('/health')
    def health():
        """Liveness check"""
        services = app.extensions['stallpos']
        return jsonify({
            'status': 'ok',
            'storage': services.storage.name,
            'business': app.config['BUSINESS_NAME'],
            'currency': app.config['CURRENCY_SYMBOL'],
        })

    # Error handlers
    @app.errorhandler(PosError)
    def pos_error(error):
        if error.status_code >= 500:
            log_error(error, error.status_code)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        if app.extensions['stallpos'].storage.name == 'database':
            db.session.rollback()
        log_error(error)
        return jsonify({'error': 'Internal server error'}), 500

    app.logger.info(f"Application created ({config_name}, {storage.name} storage)")
    return app
