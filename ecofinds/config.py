import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///ecofinds.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv('SECRET_KEY', 'devsecret')
    TOKEN_MAX_AGE = int(os.getenv('TOKEN_MAX_AGE', 7 * 24 * 3600))
    API_PREFIX = os.getenv('API_PREFIX', '/api')
    CATALOG_DEMO_FALLBACK = _env_bool('CATALOG_DEMO_FALLBACK', True)
    PROFILE_WRITE_RETRIES = int(os.getenv('PROFILE_WRITE_RETRIES', 3))
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret-key'
    PROFILE_WRITE_RETRIES = 2
