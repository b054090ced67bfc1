"""Base configuration for all environments."""

import os
from typing import List, Optional


class BaseConfig:
    """Base configuration class with common settings."""

    # Flask Configuration
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")

    # Database Configuration
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    SQLALCHEMY_ECHO: bool = False

    # SQLAlchemy Engine Options
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_size": int(os.getenv("SQLALCHEMY_ENGINE_OPTIONS_POOL_SIZE", 10)),
        "pool_recycle": int(os.getenv("SQLALCHEMY_ENGINE_OPTIONS_POOL_RECYCLE", 3600)),
        "pool_pre_ping": os.getenv("SQLALCHEMY_ENGINE_OPTIONS_POOL_PRE_PING", "True").lower() == "true",
    }

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]
    CORS_EXPOSE_HEADERS: List[str] = ["*"]
    CORS_SUPPORTS_CREDENTIALS: bool = True

    # Redis Configuration (rate limiter storage; in-memory when unset)
    REDIS_URL: Optional[str] = os.getenv("REDIS_URL")

    # Rate Limiting
    RATELIMIT_ENABLED: bool = os.getenv("RATELIMIT_ENABLED", "True").lower() == "true"
    RATELIMIT_HEADERS_ENABLED: bool = True

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")

    # Server Configuration
    JSON_SORT_KEYS: bool = False

    # Entitlements
    # Tier used for organizations without package settings. Unset means
    # such organizations fail with NO_TIER_CONFIGURED.
    DEFAULT_PACKAGE_TIER_SLUG: Optional[str] = os.getenv("DEFAULT_PACKAGE_TIER_SLUG") or None
    UPGRADE_NOTIFICATION_EXPIRY_DAYS: int = int(os.getenv("UPGRADE_NOTIFICATION_EXPIRY_DAYS", 30))
