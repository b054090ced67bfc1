"""Flask application factory and initialization."""

import logging
import logging.config
from typing import Type

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import redis

from config.base import BaseConfig

# Initialize extensions
db = SQLAlchemy()
cors = CORS()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"]
)
redis_client = None


def setup_logging(app: Flask, log_format: str = "json") -> None:
    """Setup logging configuration for the application."""
    log_level = app.config.get("LOG_LEVEL", "INFO")

    if log_format == "json":
        # Structured JSON logging
        from pythonjsonlogger import jsonlogger

        handler = logging.StreamHandler()
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
        handler.setFormatter(formatter)
        app.logger.addHandler(handler)

        # Service modules log through their own module loggers
        package_logger = logging.getLogger("leasehold")
        package_logger.addHandler(handler)
        package_logger.setLevel(getattr(logging, log_level))

    # Set log level
    app.logger.setLevel(getattr(logging, log_level))

    app.logger.info(
        "Application initialized",
        extra={
            "environment": app.config.get("ENV", "development"),
            "debug": app.debug,
            "testing": app.testing,
        }
    )


def setup_redis(app: Flask) -> redis.Redis:
    """Setup Redis connection used as the rate limiter backend."""
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        app.logger.info("Redis disabled: REDIS_URL not configured")
        return None

    try:
        redis_conn = redis.from_url(redis_url, decode_responses=True)
        redis_conn.ping()
        app.logger.info(f"Redis connected: {redis_url}")
        return redis_conn
    except Exception as e:
        app.logger.error(f"Failed to connect to Redis: {e}")
        if app.config.get("ENV") == "production":
            raise
        return None


def setup_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from pydantic import ValidationError
    from leasehold.exceptions import EntitlementError

    @app.errorhandler(EntitlementError)
    def entitlement_error(error):
        """Render entitlement errors with their error code."""
        if error.status_code >= 500:
            app.logger.error(f"Entitlement error: {error}")
        return error.to_dict(), error.status_code

    @app.errorhandler(ValidationError)
    def validation_error(error):
        """Handle pydantic validation errors raised from routes."""
        return {
            "error": "Validation Error",
            "message": "Request validation failed",
            "status": 400,
            "details": {"errors": error.errors(include_url=False, include_context=False)},
        }, 400

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return {
            "error": "Not Found",
            "message": "The requested resource was not found",
            "status": 404,
        }, 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        app.logger.error(f"Internal server error: {error}")
        return {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "status": 500,
        }, 500

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 errors."""
        return {
            "error": "Method Not Allowed",
            "message": "The HTTP method is not allowed for this resource",
            "status": 405,
        }, 405

    @app.errorhandler(400)
    def bad_request(error):
        """Handle 400 errors."""
        return {
            "error": "Bad Request",
            "message": "The request was invalid",
            "status": 400,
        }, 400


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints."""
    from leasehold.routes import api
    from leasehold.routes import package_tier_routes
    from leasehold.routes import entitlement_routes
    from leasehold.routes import addon_routes
    from leasehold.routes import portfolio_routes

    # Health check and info
    app.register_blueprint(api.bp)

    # Tier catalog administration
    app.register_blueprint(package_tier_routes.bp)

    # Per-organization entitlements (settings, limits, features)
    app.register_blueprint(entitlement_routes.bp)

    # Add-on products and purchases
    app.register_blueprint(addon_routes.bp)

    # Limit-guarded resource creation
    app.register_blueprint(portfolio_routes.bp)


def create_app(config: Type[BaseConfig] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Configuration class to use. If None, uses environment-based config.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    if config is None:
        from config.settings import settings

        if settings.is_production:
            from config.production import ProductionConfig
            config = ProductionConfig
        elif settings.is_testing:
            from config.testing import TestingConfig
            config = TestingConfig
        else:
            from config.development import DevelopmentConfig
            config = DevelopmentConfig

    app.config.from_object(config)

    # Setup logging
    setup_logging(app, app.config.get("LOG_FORMAT", "json"))

    # Initialize extensions
    db.init_app(app)

    # Setup Redis before the limiter so the limiter can use it as storage
    global redis_client
    redis_client = setup_redis(app)
    if redis_client is not None and not app.config.get("RATELIMIT_STORAGE_URI"):
        app.config["RATELIMIT_STORAGE_URI"] = app.config["REDIS_URL"]

    limiter.init_app(app)

    cors.init_app(app, resources={
        r"/*": {
            "origins": app.config.get("CORS_ORIGINS", ["*"]),
            "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": app.config.get("CORS_ALLOW_HEADERS", ["*"]),
            "expose_headers": app.config.get("CORS_EXPOSE_HEADERS", ["*"]),
            "supports_credentials": app.config.get("CORS_SUPPORTS_CREDENTIALS", True),
        }
    })

    # Request logging and JSON content checks
    from leasehold.middleware import register_middleware
    register_middleware(app)

    # Setup error handlers
    setup_error_handlers(app)

    # Register blueprints
    register_blueprints(app)

    # Note: Database tables are managed via Alembic migrations (python manage.py migrate)

    app.logger.info(
        "Flask application created",
        extra={
            "config": config.__name__,
            "database": app.config.get("SQLALCHEMY_DATABASE_URI", "").split("://")[0],
        }
    )

    return app
