"""
Shared configuration for the server, the CLI and the tests.
"""
import os
import logging
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Centralized configuration loaded from environment variables."""

    # Server
    SERVER_HOST = os.getenv("SERVER_HOST", "127.0.0.1")
    SERVER_PORT = int(os.getenv("SERVER_PORT", "3000"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Hard-coded demo credentials for /login
    DEMO_USERNAME = os.getenv("DEMO_USERNAME", "admin")
    DEMO_PASSWORD = os.getenv("DEMO_PASSWORD", "password")

    # Literal token accepted by /protected
    BEARER_TOKEN = os.getenv("BEARER_TOKEN", "valid-token-123")

    # CORS
    DEFAULT_CORS_ORIGIN = os.getenv("DEFAULT_CORS_ORIGIN", "http://localhost:3000")
    CORS_ALLOW_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
    CORS_ALLOW_HEADERS = "Content-Type, Authorization"

    # Cookies and caching (seconds)
    SESSION_COOKIE_MAX_AGE = int(os.getenv("SESSION_COOKIE_MAX_AGE", "3600"))
    THEME_COOKIE_MAX_AGE = int(os.getenv("THEME_COOKIE_MAX_AGE", "31536000"))
    CACHE_MAX_AGE = int(os.getenv("CACHE_MAX_AGE", "60"))

    # Rate limiting (slowapi limit string)
    LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10/minute")


def setup_logging():
    """Configure logging based on LOG_LEVEL."""
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        format='%(relativeCreated)5dms %(name)s:%(levelname)s:%(message)s'
    )
    return logging.getLogger(__name__)
