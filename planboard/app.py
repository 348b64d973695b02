import logging

from flask import Flask, jsonify
from flask_cors import CORS
from firebase_admin import firestore

from planboard.api import (
    activity_bp, assignees_bp, auth_bp, comments_bp,
    menus_bp, navigation_bp, notifications_bp, tasks_bp,
)
from planboard.config.settings import Settings, configure_logging
from planboard.firebase_utils import init_firebase
from planboard.middleware.error_middleware import register_error_handlers
from planboard.services.menu_directory import MenuDirectory

logger = logging.getLogger(__name__)

BLUEPRINTS = (
    auth_bp, menus_bp, navigation_bp, tasks_bp,
    assignees_bp, comments_bp, notifications_bp, activity_bp,
)


def create_app(config=None, watch_menus: bool = True):
    """Create and configure the Flask application.

    Args:
        config: Extra Flask config values (tests pass TESTING=True).
        watch_menus: Subscribe the menu directory to Firestore. When off, or
            when Firebase is not initialised, the directory is reloaded on
            each request that reads it.
    """
    app = Flask(__name__)
    app.config["SECRET_KEY"] = Settings.SECRET_KEY
    if config:
        app.config.update(config)

    CORS(app,
         resources={r"/*": {"origins": Settings.CORS_ORIGINS}},
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"])

    firebase_initialized = init_firebase(dev_mode=Settings.DEV_MODE)

    directory = MenuDirectory()
    app.extensions["menu_directory"] = directory
    if firebase_initialized and watch_menus and not app.testing:
        directory.attach(firestore.client())

    register_error_handlers(app)
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)

    @app.get("/")
    def health():
        return jsonify({
            "status": "ok",
            "service": "planboard-api",
            "firebase": "connected" if firebase_initialized else "not configured",
            "menus": "live" if directory.live else "polling",
        }), 200

    return app


def main():
    """Main entry point for running the application."""
    configure_logging()
    Settings.validate()
    app = create_app()
    logger.info("Starting planboard on port %s", Settings.PORT)
    app.run(host="0.0.0.0", port=Settings.PORT, debug=Settings.DEBUG)


if __name__ == "__main__":  # pragma: no cover
    main()
