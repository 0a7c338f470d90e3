"""
CAVIS - Cavitation Bubble Dynamics Platform
Flask application factory.

Serves the REST API for bubble simulations via registered CavisService
instances.

Usage:
    python app.py              # Development server on http://localhost:5000
    flask run                  # Same, via Flask CLI
"""

__version__ = "0.1.0"

import logging

from flask import Flask, jsonify

from physics.services import CavisRegistry
from physics.services.lic import LaserCavitationService


def create_registry():
    """Build and populate the service registry."""
    registry = CavisRegistry()
    registry.register(LaserCavitationService())
    return registry


def create_app():
    """Application factory for CAVIS Flask app."""
    app = Flask(__name__)

    # Build service registry
    registry = create_registry()
    app.extensions["cavis_registry"] = registry

    # Create and register API blueprint (shared + service-owned routes)
    from api.routes import create_api_blueprint
    api = create_api_blueprint(registry)
    app.register_blueprint(api)

    @app.route("/")
    def root():
        return jsonify({
            "name": "CAVIS",
            "version": __version__,
            "services": registry.list_all(),
        })

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app()
    app.run(debug=True, host="127.0.0.1", port=5000)
