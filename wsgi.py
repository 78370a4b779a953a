"""
WSGI entry point for production servers

    gunicorn wsgi:application
"""

import os
from stallpos import create_app

application = create_app(os.environ.get('FLASK_ENV', 'production'))
