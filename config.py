# oee_tracker/config.py
"""Configuration management for OEE Tracker"""
import os
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

class DatabaseConfig:
    """Database configuration management"""
    def __init__(self):
        self.config = {
            'host': os.getenv('DB_HOST', 'localhost'),
            'port': int(os.getenv('DB_PORT', '3306')),
            'user': os.getenv('DB_USER', 'oee'),
            'password': os.getenv('DB_PASSWORD', 'oee'),
            'database': os.getenv('DB_NAME', 'oee_tracker'),
            'autocommit': True,
            'use_unicode': True,
            'charset': 'utf8mb4'
        }
        self.pool_size = int(os.getenv('DB_POOL_SIZE', '10'))


class AuthConfig:
    """Token and password hashing settings"""
    def __init__(self):
        self.jwt_secret = os.getenv('JWT_SECRET', 'fallback-secret')
        self.jwt_algorithm = 'HS256'
        self.token_ttl_hours = int(os.getenv('JWT_EXPIRES_HOURS', '24'))
        self.bcrypt_rounds = int(os.getenv('BCRYPT_ROUNDS', '12'))
        self.cookie_name = 'token'
        self.secure_cookie = os.getenv('APP_ENV', 'development') == 'production'


class AnalyticsConfig:
    """Trailing windows used by the analytics rollups"""
    def __init__(self):
        self.window_days = int(os.getenv('ANALYTICS_WINDOW_DAYS', '30'))
        self.trend_days = int(os.getenv('TREND_WINDOW_DAYS', '7'))


db_config = DatabaseConfig()
auth_config = AuthConfig()
analytics_config = AnalyticsConfig()
