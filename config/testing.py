"""Testing environment configuration."""

from .base import BaseConfig


class TestingConfig(BaseConfig):
    """Testing environment configuration."""

    ENV = "testing"
    DEBUG = True
    TESTING = True

    # Use in-memory SQLite for tests
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ECHO = False
    # SQLite's StaticPool rejects pool sizing options
    SQLALCHEMY_ENGINE_OPTIONS = {}

    # CORS - Allow all for testing
    CORS_ORIGINS = ["*"]

    # Logging
    LOG_LEVEL = "DEBUG"
    LOG_FORMAT = "text"

    # No Redis, no rate limiting
    REDIS_URL = None
    RATELIMIT_ENABLED = False

    # Tests opt in to a default tier explicitly
    DEFAULT_PACKAGE_TIER_SLUG = None
    UPGRADE_NOTIFICATION_EXPIRY_DAYS = 30
