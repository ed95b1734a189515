# backend/agraria/routes/system.py
"""
System health endpoint.
"""

import time
from flask import Blueprint, current_app, jsonify

from ..extensions import db
from ..models import StorageEntry
from agraria.time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)

VERSION = "1.0.0"


def check_storage_health() -> dict:
    """Round-trip the storage table; returns status and latency."""
    start_time = time.time()
    try:
        key_count = db.session.query(StorageEntry).count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"keys": key_count},
        }
    except Exception:
        db.session.rollback()
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Storage health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/api/health")
def health():
    storage = check_storage_health()
    healthy = storage["status"] == "healthy"
    return jsonify({
        "status": "ok" if healthy else "degraded",
        "version": VERSION,
        "time": to_utc_z(utcnow()),
        "checks": {"storage": storage},
    }), 200 if healthy else 503
