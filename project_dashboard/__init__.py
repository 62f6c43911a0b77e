"""Flask application factory.

This module contains the create_app factory function that initializes
and configures the Flask application.
"""
from flask import Flask
from flask_sqlalchemy import SQLAlchemy

from project_dashboard.config import Config

# Initialize extensions without app context
# These will be initialized with the app in create_app()
db = SQLAlchemy()


def create_app(config_class: type = Config) -> Flask:
    """Create and configure the Flask application.

    Uses the application factory pattern to allow creating multiple
    app instances with different configurations (e.g., for testing).

    Args:
        config_class: Configuration class to use. Defaults to Config.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions with app
    db.init_app(app)

    from project_dashboard.services.session_state import FetchStore
    app.extensions['fetch_store'] = FetchStore()

    from project_dashboard.routes import register_blueprints
    register_blueprints(app)

    # Simple health check route
    @app.route('/health')
    def health_check():
        return {'status': 'healthy'}

    return app
