"""
Testing configuration for EcoChain Hub
"""
import os
from datetime import timedelta

from config.settings import Config


class TestingConfig(Config):
    """Testing configuration with isolated database and safe defaults"""

    TESTING = True
    DEBUG = False

    # Use in-memory SQLite for fast tests
    SQLALCHEMY_DATABASE_URI = os.getenv(
        'TEST_DATABASE_URL',
        'sqlite:///:memory:'
    )

    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-bytes'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=5)

    # Disable rate limiting in tests
    RATELIMIT_ENABLED = False

    # Never reach out to the real geocoder
    GEOCODER_ENABLED = False

    ENABLE_SCHEDULER = False

    # Use simple password hashing for speed
    BCRYPT_LOG_ROUNDS = 4

    LOG_LEVEL = 'WARNING'

    CORS_ORIGINS = ['http://localhost:5173', 'http://localhost:3000']
