"""
Flask route blueprints for PartsQuest Web.

One blueprint per screen group:
- main: Landing page and health check
- auth: Login, registration, logout
- subscription: Plan selection and checkout hand-off
- dashboard: Part requests, search, voice input
- profile: Profile view and update

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .auth import auth_bp
from .subscription import subscription_bp
from .dashboard import dashboard_bp
from .profile import profile_bp

__all__ = [
    "main_bp",
    "auth_bp",
    "subscription_bp",
    "dashboard_bp",
    "profile_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(subscription_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(profile_bp)
