"""
Configuration settings for different environments
"""
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///ecochain.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Authentication
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ALGORITHM = 'HS256'
    BCRYPT_LOG_ROUNDS = 12
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get('JWT_EXPIRES_HOURS', 24)))

    # CORS
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    API_PREFIX = '/api'

    # Rewards
    POINTS_PER_KG = 10
    MAX_WEIGHT_KG = float(os.environ.get('MAX_WEIGHT_KG', 1000))
    REDEMPTION_TTL_HOURS = 24
    TRANSACTIONS_PAGE_SIZE = 20
    LEADERBOARD_SIZE = 10

    # Reverse geocoding (Nominatim)
    GEOCODER_ENABLED = os.environ.get('GEOCODER_ENABLED', 'true').lower() in ['true', 'on', '1']
    GEOCODER_URL = os.environ.get('GEOCODER_URL', 'https://nominatim.openstreetmap.org/reverse')
    GEOCODER_TIMEOUT = float(os.environ.get('GEOCODER_TIMEOUT', 5))
    GEOCODER_USER_AGENT = os.environ.get('GEOCODER_USER_AGENT', 'ecochain-hub/1.0')

    # Rate limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL') or 'memory://'
    RATELIMIT_DEFAULT = '100 per minute'

    # Background scheduler
    ENABLE_SCHEDULER = os.environ.get('ENABLE_SCHEDULER', '').lower() == 'true'

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 20,
        'max_overflow': 40,
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    }
