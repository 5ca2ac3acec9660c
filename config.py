import os


def get_database_uri():
    """
    Resolve the database URI from the environment
    Falls back to a local SQLite file for development
    """
    url = os.environ.get('DATABASE_URL')
    if url:
        # Heroku-style URLs still use the legacy scheme
        if url.startswith('postgres://'):
            url = url.replace('postgres://', 'postgresql://', 1)
        return url
    return 'sqlite:///' + os.path.join(os.getcwd(), 'stockroom.db')


def _env_bool(name, default='false'):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


class Config:
    """Base configuration"""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database
    SQLALCHEMY_DATABASE_URI = None  # Will be set at runtime
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # JWT
    JWT_SECRET = os.environ.get('JWT_SECRET') or 'dev-jwt-secret-change-in-production'
    JWT_ALGORITHM = os.environ.get('JWT_ALGORITHM', 'HS256')
    JWT_ISSUER = os.environ.get('JWT_ISSUER', 'stockroom')
    JWT_AUDIENCE = os.environ.get('JWT_AUDIENCE', 'stockroom-clients')
    JWT_EXPIRES_MINUTES = int(os.environ.get('JWT_EXPIRES_MINUTES', 60 * 24))

    # Items
    SKU_PREFIX = os.environ.get('SKU_PREFIX', 'SHPWPR')
    PHOTO_BASE_URL = os.environ.get('PHOTO_BASE_URL', 'http://localhost:9000/storage/v1/object/public')
    PHOTO_BUCKET = os.environ.get('PHOTO_BUCKET', 'item-photos')

    # Pagination
    DEFAULT_PAGE_SIZE = int(os.environ.get('DEFAULT_PAGE_SIZE', 20))
    MAX_PAGE_SIZE = int(os.environ.get('MAX_PAGE_SIZE', 100))

    # Change feed fan-out through Dapr pub/sub
    CHANGE_FEED_PUBSUB_ENABLED = _env_bool('CHANGE_FEED_PUBSUB_ENABLED')
    CHANGE_FEED_PUBSUB_NAME = os.environ.get('CHANGE_FEED_PUBSUB_NAME', 'stockroom-pubsub')

    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    LOG_LEVEL = 'DEBUG'


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    # Use in-memory SQLite for testing
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET = 'test-jwt-secret'
    CHANGE_FEED_PUBSUB_ENABLED = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
