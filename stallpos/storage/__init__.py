"""
Storage Backends
create_storage() picks the backend once, before the application serves requests.
"""

import logging

from stallpos.models import db
from stallpos.storage.base import Storage
from stallpos.storage.database import DatabaseStorage
from stallpos.storage.memory import MemoryStorage
from stallpos.storage.seed import seed_default_data

logger = logging.getLogger(__name__)

__all__ = ['Storage', 'MemoryStorage', 'DatabaseStorage', 'create_storage', 'seed_default_data']


def _seed(app, storage):
    if app.config.get('SEED_DEFAULT_DATA'):
        seed_default_data(
            storage,
            admin_password=app.config['DEFAULT_ADMIN_PASSWORD'],
            staff_password=app.config['DEFAULT_STAFF_PASSWORD'],
        )


def create_storage(app):
    """
    Build the configured storage backend and make it ready for use

    The database backend creates its tables and seeds default data before
    returning. If that fails, the error is logged and the in-memory backend is
    used for the lifetime of the process.

    Args:
        app: Flask application with SQLAlchemy already initialised

    Returns:
        Storage: Ready backend
    """
    backend = app.config.get('STORAGE_BACKEND', 'memory')

    if backend == 'database':
        try:
            with app.app_context():
                db.create_all()
                storage = DatabaseStorage()
                _seed(app, storage)
            app.logger.info("Database storage initialized")
            return storage
        except Exception as e:
            app.logger.error(f"Database storage initialization failed: {e}")
            app.logger.info("Using in-memory storage...")
    elif backend != 'memory':
        raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}, expected 'memory' or 'database'")

    storage = MemoryStorage()
    _seed(app, storage)
    app.logger.info("In-memory storage initialized")
    return storage
