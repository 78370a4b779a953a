"""
Application Entry Point
Initializes and runs the Flask application and its maintenance commands
"""

import os
import logging
from stallpos import create_app, db
from stallpos.storage import seed_default_data

# Determine configuration environment
config_name = os.environ.get('FLASK_ENV', 'development')
app = create_app(config_name)

# Setup logging
if not os.path.exists(app.config['LOG_FOLDER']):
    os.makedirs(app.config['LOG_FOLDER'])

logging.basicConfig(
    level=getattr(logging, app.config['LOG_LEVEL']),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(os.path.join(app.config['LOG_FOLDER'], 'app.log')),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)


@app.shell_context_processor
def make_shell_context():
    """Make database, models and services available in Flask shell"""
    from stallpos import models
    return {
        'db': db,
        'services': app.extensions['stallpos'],
        'Transaction': models.Transaction,
        'DailySummary': models.DailySummary,
        'InventorySession': models.InventorySession,
    }


@app.cli.command()
def init_db():
    """Create the database tables"""
    logger.info("Initializing database...")
    db.create_all()
    logger.info("Database initialized successfully!")


@app.cli.command()
def seed_data():
    """Create the default users, categories and menu"""
    storage = app.extensions['stallpos'].storage
    created = seed_default_data(
        storage,
        admin_password=app.config['DEFAULT_ADMIN_PASSWORD'],
        staff_password=app.config['DEFAULT_STAFF_PASSWORD'],
    )
    logger.info(f"Seeded into {storage.name} storage: {created}")


@app.cli.command()
def rebuild_summaries():
    """Recompute daily, weekly and monthly summaries from the transactions"""
    logger.info("Rebuilding summaries...")
    result = app.extensions['stallpos'].summaries.rebuild_summaries()
    logger.info(f"Rebuilt from {result['transactions']} transactions: "
                f"{result['daily']} daily, {result['weekly']} weekly, {result['monthly']} monthly")


if __name__ == '__main__':
    is_dev = config_name == 'development'
    use_reloader = os.environ.get('FLASK_USE_RELOADER', 'true').lower() == 'true'

    logger.info(f"Starting {app.config['BUSINESS_NAME']} POS on "
                f"{app.extensions['stallpos'].storage.name} storage...")
    logger.info(f"Debug mode: {is_dev}, Auto-reload: {use_reloader}")

    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', 5000)),
        debug=is_dev,
        use_reloader=use_reloader
    )
