"""
Configuration objects for the Flask application.
Sets the data that can be accessed with app.config["key"]
"""

import os


def _env_bool(name, default):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


def _env_list(name):
    raw = os.environ.get(name, '')
    return [value.strip() for value in raw.split(',') if value.strip()]


class BaseConfig:
    # pylint: disable=too-few-public-methods
    """Base configuration"""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY')

    DATABASE_BACKEND = 'mongo'
    MONGODB_URI = os.environ.get('MONGODB_URI', 'mongodb://localhost:27017')
    MONGODB_DATABASE = os.environ.get('MONGODB_DATABASE', 'docstore')
    MONGODB_ID_FIELD = os.environ.get('MONGODB_ID_FIELD', 'id')
    MONGODB_CONNECT_EAGERLY = _env_bool('MONGODB_CONNECT_EAGERLY', 'false')
    MONGODB_SERVER_SELECTION_TIMEOUT_MS = int(os.environ.get('MONGODB_SERVER_SELECTION_TIMEOUT_MS', '5000'))
    MONGODB_CONNECT_TIMEOUT_MS = int(os.environ.get('MONGODB_CONNECT_TIMEOUT_MS', '10000'))
    MONGODB_MAX_POOL_SIZE = int(os.environ.get('MONGODB_MAX_POOL_SIZE', '100'))

    # Collections served by /api/v2, empty means every valid name
    DOCSTORE_COLLECTIONS = _env_list('DOCSTORE_COLLECTIONS')


class DevelopmentConfig(BaseConfig):
    # pylint: disable=too-few-public-methods
    """Development configuration"""

    FLASK_DEBUG = True


class QAConfig(BaseConfig):
    # pylint: disable=too-few-public-methods
    """QA configuration"""

    FLASK_DEBUG = False
    MONGODB_CONNECT_EAGERLY = True


class ProductionConfig(BaseConfig):
    # pylint: disable=too-few-public-methods
    """Production configuration"""

    FLASK_DEBUG = False
    MONGODB_CONNECT_EAGERLY = True
