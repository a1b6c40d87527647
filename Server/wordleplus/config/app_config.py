"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env next to this package (if present)
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


def _env_bool(name: str, default: str = 'False') -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes', 'on')


def _env_list(name: str, default: str) -> list:
    return [item.strip() for item in os.getenv(name, default).split(',') if item.strip()]


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = _env_bool('DEBUG')
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 8080))
    CORS_ORIGINS = _env_list('CORS_ORIGINS', 'http://localhost:5173')

    # Room Settings
    ROOM_CODE_LENGTH = int(os.getenv('ROOM_CODE_LENGTH', 6))
    RESUME_GRACE_SECONDS = float(os.getenv('RESUME_GRACE_SECONDS', 30))

    # Game Settings
    DUEL_ROUND_SECONDS = float(os.getenv('DUEL_ROUND_SECONDS', 300))
    SHARED_QUEUE_SIZE = int(os.getenv('SHARED_QUEUE_SIZE', 10))
    SHARED_QUEUE_REFILL = int(os.getenv('SHARED_QUEUE_REFILL', 3))

    # Dictionary Settings
    DICTIONARY_URL = os.getenv('DICTIONARY_URL')
    DICTIONARY_TIMEOUT_SECONDS = float(os.getenv('DICTIONARY_TIMEOUT_SECONDS', 2.0))
    WORDLIST_PATH = os.getenv('WORDLIST_PATH')

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    RESUME_GRACE_SECONDS = 30
    DUEL_ROUND_SECONDS = 300
    DICTIONARY_URL = None


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
