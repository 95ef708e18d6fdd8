# backend/grocerpos/__init__.py
import logging

from flask import Flask, request, jsonify

from .config import Config
from .extensions import db, migrate, EXTENSION_KEY


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def create_app(overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    from .datastore import build_store, DataStoreError
    from .services.auth_service import build_auth, AuthBackendError
    from .services.session_service import AuthEvents

    store = app.config.get("DATA_STORE") or build_store(app.config)
    app.extensions[EXTENSION_KEY] = {
        "store": store,
        "auth": app.config.get("AUTH_GATEWAY") or build_auth(app.config, store),
        "auth_events": AuthEvents(),
    }
    app.logger.info(
        "Using data backend '%s' and auth backend '%s'",
        store.name, app.extensions[EXTENSION_KEY]["auth"].name,
    )

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.dashboard import dashboard_bp
    from .routes.pos import pos_bp
    from .routes.inventory import inventory_bp
    from .routes.sales import sales_bp
    from .routes.shifts import shifts_bp
    from .routes.settings import settings_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(pos_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(shifts_bp)
    app.register_blueprint(settings_bp)

    @app.errorhandler(DataStoreError)
    @app.errorhandler(AuthBackendError)
    def handle_backend_failure(error):
        # Raised outside a route's own handling, e.g. while validating the bearer token
        app.logger.error("Backend failure on %s %s: %s", request.method, request.path, error)
        return jsonify({"error": str(error)}), 502

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config["CORS_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type, Idempotency-Key"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
