# Overview: Flask extension instances and accessors for the per-app data store and auth gateway.

from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()

EXTENSION_KEY = "grocerpos"


def get_store():
    """Data store bound to the running app."""
    return current_app.extensions[EXTENSION_KEY]["store"]


def get_auth():
    """Auth gateway bound to the running app."""
    return current_app.extensions[EXTENSION_KEY]["auth"]


def get_auth_events():
    return current_app.extensions[EXTENSION_KEY]["auth_events"]
