from __future__ import annotations

from flask import Blueprint, jsonify, request

from synqchain.erp import get_erp_adapter
from synqchain.routes.adapter_relay import relay


analytics_bp = Blueprint("analytics", __name__)


@analytics_bp.route("/analytics/activity", methods=["GET"])
def activity_feed():
    return jsonify(relay("activity", "activity_item[]", lambda: get_erp_adapter().get_activity()))


@analytics_bp.route("/analytics/kpis", methods=["GET"])
def kpis():
    start = (request.args.get("start") or "").strip() or None
    end = (request.args.get("end") or "").strip() or None
    return jsonify(relay("kpis", "kpis", lambda: get_erp_adapter().get_kpis(start=start, end=end)))


@analytics_bp.route("/erps/health", methods=["GET"])
def erp_health():
    return jsonify(relay("erp_health", "erp_health_item[]", lambda: get_erp_adapter().get_erp_health()))
