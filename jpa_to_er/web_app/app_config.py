# -*- coding: utf-8 -*-
"""
Configuration module - loads settings from environment variables
"""
import os
from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


def _split_list(value):
    return tuple(item.strip() for item in value.split(',') if item.strip())


class Config:
    """Base configuration"""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(16 * 1024 * 1024)))  # 16MB
    DEBUG = False
    TESTING = False

    # Diagram generation
    EXTRA_VALUE_TYPES = _split_list(os.getenv('EXTRA_VALUE_TYPES', ''))
    DEFAULT_FORMAT = os.getenv('DEFAULT_FORMAT', 'mermaid')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE', '')

    # Server
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', '5001'))


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    HOST = os.getenv('HOST', '0.0.0.0')

    @classmethod
    def validate(cls):
        """Check the settings production must override"""
        required = [
            ('SECRET_KEY', cls.SECRET_KEY, 'dev-secret-key-change-in-production'),
        ]

        missing = []
        for name, value, default in required:
            if not value or value == default:
                missing.append(name)

        if missing:
            raise ValueError(f"Production configuration is missing: {', '.join(missing)}")

        if cls.DEFAULT_FORMAT not in ('mermaid', 'dot'):
            raise ValueError(f"Unsupported DEFAULT_FORMAT: {cls.DEFAULT_FORMAT}")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True


def get_config():
    """Pick the configuration class from the FLASK_ENV environment variable"""
    env = os.getenv('FLASK_ENV', 'development')

    config_map = {
        'development': DevelopmentConfig,
        'production': ProductionConfig,
        'testing': TestingConfig
    }

    return config_map.get(env, DevelopmentConfig)


config = get_config()
