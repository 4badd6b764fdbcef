"""
PartsQuest Web - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env + config classes)
2. Creates the backend gateway (fail-fast on a bad backend URL)
3. Creates the per-session state store and the plan catalog
4. Registers route blueprints
5. Sets up error handlers and context processors

ARCHITECTURE:
    Browser
    └── signed session cookie: bearer token ONLY

    Flask (request threads)
    ├── PortalController per request (single owner of AppState mutations)
    ├── PortalStateStore: AppState per token, rebuilt after a restart
    └── RemoteGateway: shared requests.Session to the procurement backend
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, flash, redirect, url_for
from werkzeug.exceptions import RequestEntityTooLarge

from config import BASE_DIR, CONFIGS
from logging_config import setup_logging, get_logger
from core.exceptions import ConfigurationError
from core.gateway import RemoteGateway
from models.access import ViewState
from models.subscription import PlanCatalog
from services.portal import PortalStateStore
from routes import register_blueprints
from routes.helpers import get_portal


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def create_app(config_name: Optional[str] = None, gateway: Optional[RemoteGateway] = None) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_name: "development", "production" or "testing"
            (default: FLASK_ENV, falling back to development)
        gateway: Pre-built gateway (tests inject a mock here)

    Returns:
        Configured Flask application

    Raises:
        ConfigurationError: If the config name or backend URL is invalid
    """
    # .env next to app.py takes precedence over the shell environment
    env_file = BASE_DIR / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    config_name = config_name or os.environ.get("FLASK_ENV", "development")
    config_class = CONFIGS.get(config_name)
    if config_class is None:
        raise ConfigurationError("FLASK_ENV", f"unknown configuration {config_name!r}")

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.config["ENVIRONMENT"] = config_name

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = config_name == "production"

    root_logger = setup_logging(
        app_name="partsquest_web",
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting PartsQuest Web in {config_name} mode")

    # =========================================================================
    # CORE INITIALIZATION (FAIL-FAST)
    # =========================================================================

    if gateway is None:
        try:
            gateway = RemoteGateway(
                app.config["API_BASE_URL"],
                timeout=app.config["API_TIMEOUT_SECONDS"],
            )
        except ConfigurationError as e:
            logger.error(f"FATAL: Cannot start application - {e}")
            raise

    app.config["GATEWAY"] = gateway
    app.config["PORTAL_STATES"] = PortalStateStore(
        gateway,
        idle_seconds=app.config["STATE_IDLE_SECONDS"],
    )
    app.config["PLAN_CATALOG"] = PlanCatalog(
        app.config["SUBSCRIPTION_PRICE_IDS"],
        app.config["PRO_PRICE_ID"],
    )

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # CONTEXT PROCESSORS
    # =========================================================================

    @app.context_processor
    def inject_session_context():
        """Current user and screen for the page header."""
        portal = get_portal()
        return {
            "current_user": portal.profile,
            "current_view": portal.view.value,
            "has_session": portal.has_session,
            "plan_choice_pending": portal.plan_choice_pending,
            "ViewState": ViewState,
        }

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(RequestEntityTooLarge)
    def handle_form_too_large(e):
        max_kb = app.config.get("MAX_CONTENT_LENGTH", 64 * 1024) / 1024
        flash(f"Form too large. Maximum size is {max_kb:.0f} KB.", "error")
        return redirect(url_for("main.landing"))

    @app.errorhandler(404)
    def handle_not_found(e):
        flash("Page not found.", "warning")
        return redirect(url_for("main.landing"))

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        flash("An unexpected error occurred. Please try again.", "error")
        return redirect(url_for("main.landing"))

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
