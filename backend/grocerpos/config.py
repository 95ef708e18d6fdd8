# backend/grocerpos/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key (also signs the cart cookie)
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Which data store and auth service back the app: "sql" / "local" run
    # everything against SQLALCHEMY_DATABASE_URI, "supabase" uses the hosted project.
    DATA_BACKEND = os.environ.get("DATA_BACKEND", "sql").lower()
    AUTH_BACKEND = os.environ.get("AUTH_BACKEND", "local").lower()

    # SQLite DB stored in backend/instance/grocerpos.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///grocerpos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
    SUPABASE_KEY = os.environ.get("SUPABASE_KEY", "")

    # Catalog / checkout behaviour
    LOW_STOCK_THRESHOLD = int(os.environ.get("LOW_STOCK_THRESHOLD", "10"))
    DEFAULT_PAYMENT_METHOD = os.environ.get("DEFAULT_PAYMENT_METHOD", "cash")
    CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "Rp")
    STORE_NAME = os.environ.get("STORE_NAME", "Grocery Store")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    CORS_ORIGINS = {
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173",
        ).split(",")
        if origin.strip()
    }
