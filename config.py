"""
Configuration for PartsQuest Web.

The procurement backend is the only source of truth; this app holds nothing
but the bearer token in its session cookie. Point PARTSQUEST_API_URL at the
backend you want to talk to.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent

DEFAULT_API_BASE_URL = "https://partsquest-backend-production.onrender.com"


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    SESSION_COOKIE_NAME = "partsquest_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # Procurement backend
    API_BASE_URL = os.environ.get("PARTSQUEST_API_URL", DEFAULT_API_BASE_URL)
    API_TIMEOUT_SECONDS = float(os.environ.get("PARTSQUEST_API_TIMEOUT", "15"))

    # Browser speech recognition (single utterance, final results only)
    VOICE_LOCALE = "en-US"

    # Form limits
    MAX_DESCRIPTION_LENGTH = 2000
    MAX_SEARCH_LENGTH = 500
    MAX_CONTENT_LENGTH = 64 * 1024  # form posts only, no uploads

    # Per-session state kept in memory; dropped after this long unused
    STATE_IDLE_SECONDS = int(os.environ.get("PARTSQUEST_STATE_IDLE_SECONDS", "3600"))

    # ==========================================================================
    # Subscription plans
    # ==========================================================================
    # Price ids belong to the payment provider account the backend uses.
    # Override them per environment with STRIPE_PRICE_<PLAN KEY>.
    # ==========================================================================
    PRO_PRICE_ID = os.environ.get(
        "STRIPE_PRICE_PRO", "price_1QKxJhJNcmPXDtNg8YQzQhWx"
    )
    SUBSCRIPTION_PRICE_IDS = {
        "test": os.environ.get("STRIPE_PRICE_TEST", "price_1RyNopKAQFTUDRwnEcbiX8RQ"),
        "starter": os.environ.get("STRIPE_PRICE_STARTER", "price_1RyNwlKAQFTUDRwnVWZpwUn3"),
        "professional": os.environ.get(
            "STRIPE_PRICE_PROFESSIONAL", "price_1RyNy2KAQFTUDRwnKOU8UfD3"
        ),
        "fleet": os.environ.get("STRIPE_PRICE_FLEET", "price_1RyNzDKAQFTUDRwnv3XmIOFk"),
        "enterprise": os.environ.get(
            "STRIPE_PRICE_ENTERPRISE", "price_1RyO0HKAQFTUDRwnDQSDomWt"
        ),
    }


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 60 * 60 * 24 * 30  # token outlives browser restarts


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    SECRET_KEY = "testing-secret-key"
    API_BASE_URL = "https://backend.test"


CONFIGS = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
