"""
Main application module for the Comment Connections game API.

This module sets up the Flask application, registers the API Blueprint,
and defines the root route and error handlers.

Routes:
- /: Welcome message for the Comment Connections game API.

Error Handlers:
- 404 Not Found: Handles requests for non-existent routes.
- 405 Method Not Allowed: Handles requests with an unsupported method.
- 500 Internal Server Error: Handles internal server errors.
"""

import logging

from flask import Flask

from .blueprints.api.routes import api_bp
from .config import Config
from .services.utils import create_response

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(level=app.config["LOG_LEVEL"], format=LOG_FORMAT)

    app.register_blueprint(api_bp)

    @app.route("/")
    def index():
        return create_response(data={"message": "Welcome to the Comment Connections game API!"})

    @app.errorhandler(404)
    def not_found(error):
        return create_response(error="Not Found", status_code=404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return create_response(error="Method Not Allowed", status_code=405)

    @app.errorhandler(500)
    def internal_server_error(error):
        return create_response(error="Internal Server Error", status_code=500)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
