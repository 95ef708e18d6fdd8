# backend/grocerpos/routes/system.py
"""
System health endpoint.

Checks that the configured data store and auth backend answer.
"""

import time
from flask import Blueprint, current_app
from ..extensions import get_auth, get_store
from ..time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)


def _timed_check(name: str, check) -> dict:
    start_time = time.time()
    try:
        check()
    except Exception as e:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("%s health check failed", name)
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": str(e),
        }
    elapsed_ms = (time.time() - start_time) * 1000
    return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}


@system_bp.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
    - 200: data store and auth backend reachable
    - 503: one of them failed
    """
    start_time = time.time()
    store = get_store()
    auth = get_auth()

    checks = {
        "data_store": dict(_timed_check("Data store", store.ping), backend=store.name),
        "auth": dict(_timed_check("Auth", auth.ping), backend=auth.name),
    }
    healthy = all(check["status"] == "healthy" for check in checks.values())

    response = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": to_utc_z(utcnow()),
        "total_latency_ms": round((time.time() - start_time) * 1000, 2),
        "checks": checks,
    }
    return response, 200 if healthy else 503
