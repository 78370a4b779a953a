"""
Application Configuration
Loads environment variables and provides configuration classes for different environments
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))


def _default_backend():
    """Use the database backend only when a database URL was supplied"""
    if os.environ.get('STORAGE_BACKEND'):
        return os.environ['STORAGE_BACKEND'].lower()
    return 'database' if os.environ.get('DATABASE_URL') else 'memory'


class Config:
    """Base configuration class"""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Storage backend: 'memory' or 'database'
    STORAGE_BACKEND = _default_backend()

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'stall_pos.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Default data (users, categories, menu) created on first start
    SEED_DEFAULT_DATA = os.environ.get('SEED_DEFAULT_DATA', 'True').lower() == 'true'
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD', 'admin@2020')
    DEFAULT_STAFF_PASSWORD = os.environ.get('DEFAULT_STAFF_PASSWORD', 'Chai-fi@2025')

    # Business Configuration
    BUSINESS_NAME = os.environ.get('BUSINESS_NAME', 'Chai-fi')
    CURRENCY_SYMBOL = os.environ.get('CURRENCY_SYMBOL', 'Rs.')
    DEFAULT_BILLER_NAME = os.environ.get('DEFAULT_BILLER_NAME', 'Sriram')

    # Logging
    LOG_FOLDER = os.path.join(basedir, 'logs')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False  # Set to True to see SQL queries


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    STORAGE_BACKEND = 'memory'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SEED_DEFAULT_DATA = False


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
