# backend/agraria/config.py
from __future__ import annotations
import os
from datetime import timedelta


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


class Config:
    # Optional "SECRET_KEY", with default dev key (signs the per-client session cookie)
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/agraria.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///agraria.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Cosmetic delay before a login result, so the UI can show its spinner
    LOGIN_DELAY_SECONDS = _env_float("LOGIN_DELAY_SECONDS", 1.0)

    # Absolute session lifetime, counted from the login timestamp
    SESSION_MAX_AGE_HOURS = _env_int("SESSION_MAX_AGE_HOURS", 24)

    # "Remember me" cookies outlive the browser for the same span
    PERMANENT_SESSION_LIFETIME = timedelta(hours=SESSION_MAX_AGE_HOURS)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    BCRYPT_ROUNDS = _env_int("BCRYPT_ROUNDS", 12)

    # IVA applied to every sale
    TAX_RATE = os.environ.get("TAX_RATE", "0.21")

    # Create the storage table on startup when it does not exist yet
    AUTO_CREATE_TABLES = True
