import os
from datetime import timedelta

MAX_UPLOAD_SIZE = 10 * 1024 * 1024

ALLOWED_UPLOAD_TYPES = frozenset([
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
    'image/svg+xml',
    'application/pdf',
    'text/plain',
    'text/markdown',
    'application/json',
    'video/mp4',
    'video/webm',
    'audio/mpeg',
    'audio/wav',
])


class ConfigError(RuntimeError):
    pass


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY')
    JWT_SECRET = os.environ.get('JWT_SECRET')
    JWT_REFRESH_SECRET = os.environ.get('JWT_REFRESH_SECRET')
    ACCESS_TOKEN_TTL = timedelta(days=int(os.environ.get('ACCESS_TOKEN_DAYS', 7)))
    REFRESH_TOKEN_TTL = timedelta(days=int(os.environ.get('REFRESH_TOKEN_DAYS', 30)))

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URI', 'sqlite:///inkfolio.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    BLOB_BACKEND = os.environ.get('BLOB_BACKEND', 'local')
    BLOB_API_URL = os.environ.get('BLOB_API_URL', 'https://blob.vercel-storage.com')
    BLOB_READ_WRITE_TOKEN = os.environ.get('BLOB_READ_WRITE_TOKEN')
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(os.path.dirname(__file__), 'uploads'))
    UPLOAD_URL_PREFIX = '/api/uploads'
    MAX_UPLOAD_SIZE = MAX_UPLOAD_SIZE
    ALLOWED_UPLOAD_TYPES = ALLOWED_UPLOAD_TYPES
    # Multipart overhead on top of the file itself
    MAX_CONTENT_LENGTH = MAX_UPLOAD_SIZE + 1024 * 1024

    CONTENT_DIR = os.environ.get('CONTENT_DIR', os.path.join(os.getcwd(), 'data'))
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'http://localhost:3000').split(',')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET = 'test-access-secret'
    JWT_REFRESH_SECRET = 'test-refresh-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    BLOB_BACKEND = 'local'


REQUIRED_SETTINGS = ('JWT_SECRET', 'JWT_REFRESH_SECRET', 'SQLALCHEMY_DATABASE_URI')


def check_required_settings(config):
    missing = [key for key in REQUIRED_SETTINGS if not config.get(key)]
    if config.get('BLOB_BACKEND') == 'http' and not config.get('BLOB_READ_WRITE_TOKEN'):
        missing.append('BLOB_READ_WRITE_TOKEN')
    if missing:
        raise ConfigError('Missing required settings: ' + ', '.join(missing))
