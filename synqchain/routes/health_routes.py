from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import Blueprint, Response, current_app, jsonify

from synqchain.db import get_db
from synqchain.erp import get_erp_adapter
from synqchain.errors import IntegrationError
from synqchain.observability import metrics_snapshot, prometheus_metrics_text


logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@health_bp.route("/health", methods=["GET"])
def health():
    try:
        adapter = get_erp_adapter()
        adapter_health = adapter.health()
    except Exception as exc:
        raise IntegrationError(
            code="health_check_failed",
            message_key="health_check_failed",
            message=str(exc),
            details=repr(exc),
        ) from exc
    return jsonify(
        {
            "ok": True,
            "adapter": {
                "id": adapter.adapter_id,
                "name": adapter.name,
                "health": adapter_health,
            },
            "timestamp": _timestamp(),
            "environment": current_app.config.get("ENV", "unknown"),
            "metrics": {"http": metrics_snapshot()},
        }
    )


@health_bp.route("/healthz", methods=["GET"])
def healthz():
    try:
        get_db().execute("SELECT 1").fetchone()
    except Exception as exc:
        logger.warning("healthz_database_unavailable", extra={"error_type": type(exc).__name__})
        return (
            jsonify(
                {
                    "ok": False,
                    "status": "unhealthy",
                    "timestamp": _timestamp(),
                    "error": str(exc) or "Database check failed",
                    "checks": {"database": "unhealthy"},
                }
            ),
            503,
        )
    return jsonify(
        {
            "ok": True,
            "status": "healthy",
            "timestamp": _timestamp(),
            "checks": {"database": "healthy"},
        }
    )


@health_bp.route("/metrics", methods=["GET"])
def metrics():
    return Response(prometheus_metrics_text(), mimetype="text/plain; version=0.0.4")
